# firflow/core/parallel.py

"""
Thread-pool variant of the direct convolution kernel.

Every output index is an independent task: it reads the two (shared,
read-only) inputs and writes a single slot of the output array, so the tasks
need no synchronization among themselves. The caller joins on the futures
before the output is returned.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .convolution import as_signal, order_operands, output_sample, result_length
from .design import check_count

logger = logging.getLogger(__name__)

DEFAULT_NUM_WORKERS = 4


class ParallelConvolver:
    """
    Owns a fixed-size worker pool and computes full linear convolutions on it.

    The pool is created once in the constructor, reused by every call to
    `convolve`, and released by `close()` (or by leaving a `with` block).
    Results are identical to `firflow.core.convolution.convolve`.

    Example:
        >>> with ParallelConvolver(num_workers=2) as conv:
        ...     conv.convolve([1, 2], [1, 2])
        array([1, 4, 4])
    """

    def __init__(self, num_workers: int = DEFAULT_NUM_WORKERS):
        check_count(num_workers, "num_workers")
        self.num_workers = num_workers
        self._executor: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(
            max_workers=num_workers, thread_name_prefix="firflow-conv"
        )
        logger.debug(f"Started convolution pool with {num_workers} workers.")

    @property
    def closed(self) -> bool:
        return self._executor is None

    def convolve(self, a: ArrayLike, b: ArrayLike) -> NDArray:
        """
        Full linear convolution of `a` and `b`, one pool task per output index.

        Blocks until all tasks have completed. There is no cancellation: once
        dispatched, every task of the call runs to completion.

        Raises:
            InvalidInput: If either input is empty or not one-dimensional.
            RuntimeError: If the convolver has been closed.
        """
        if self._executor is None:
            raise RuntimeError("ParallelConvolver is closed.")
        a = as_signal(a, "a")
        b = as_signal(b, "b")
        short, long = order_operands(a, b)
        out_len = result_length(a, b)
        output = np.zeros(out_len, dtype=np.result_type(a, b))

        def compute(n: int) -> None:
            output[n] = output_sample(short, long, n)

        logger.debug(f"Dispatching {out_len} convolution tasks to {self.num_workers} workers.")
        futures = [self._executor.submit(compute, n) for n in range(out_len)]
        wait(futures)
        for future in futures:
            # Re-raises the first task exception, if any.
            future.result()
        return output

    def __call__(self, a: ArrayLike, b: ArrayLike) -> NDArray:
        return self.convolve(a, b)

    def close(self) -> None:
        """Shuts the worker pool down, waiting for running tasks. Idempotent."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            logger.debug("Convolution pool shut down.")

    def __enter__(self) -> "ParallelConvolver":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"ParallelConvolver(num_workers={self.num_workers}, {state})"
