# firflow/cli/filter_cmd.py

"""
CLI commands for designing filters, convolving sequences and streaming a
signal through a filter.
"""

import logging
from contextlib import nullcontext
from pathlib import Path
from typing import List, Optional

import click
import numpy as np
import pandas as pd
from numpy.typing import NDArray
from tabulate import tabulate

from firflow.config import FirflowConfig
from firflow.core.convolution import convolve
from firflow.core.design import DesignMethod, design_filter
from firflow.core.errors import FirflowError
from firflow.core.parallel import ParallelConvolver
from firflow.core.streaming import StreamingFilter

logger = logging.getLogger(__name__)

METHOD_CHOICES = [m.value for m in DesignMethod]
PARALLEL_OPTION_HELP = "Use the parallel kernel with [parallel] num_workers from config."
WORKERS_OPTION_HELP = "Use the parallel kernel with this many worker threads (implies --parallel)."


# --- Helpers ---

def _get_config(ctx: click.Context) -> FirflowConfig:
    if isinstance(ctx.obj, dict) and 'config' in ctx.obj:
        return ctx.obj['config']
    return FirflowConfig()


def _resolve_workers(ctx: click.Context, parallel: bool, workers: Optional[int]) -> Optional[int]:
    """Worker count for the parallel kernel, or None to run sequentially."""
    if workers is not None:
        return workers
    if parallel:
        return _get_config(ctx).parallel.num_workers
    return None


def parse_sequence(text: str) -> NDArray:
    """
    Parses a comma-separated list of numbers.

    Integers stay integers unless any value needs a float.
    """
    items = [item.strip() for item in text.split(",") if item.strip()]
    if not items:
        raise click.BadParameter(f"Expected a comma-separated list of numbers, got {text!r}.")
    try:
        return np.array([int(item) for item in items])
    except ValueError:
        pass
    try:
        return np.array([float(item) for item in items], dtype=np.float64)
    except ValueError:
        raise click.BadParameter(f"Could not parse {text!r} as a list of numbers.")


def stream_blocks(sfilter: StreamingFilter, signal: NDArray, block_size: int) -> NDArray:
    """Feeds `signal` to `sfilter` in consecutive blocks and concatenates the outputs."""
    outputs: List[NDArray] = []
    for start in range(0, signal.shape[0], block_size):
        outputs.append(sfilter.apply_filter(signal[start:start + block_size]))
    if not outputs:
        return np.zeros(0, dtype=np.float64)
    return np.concatenate(outputs)


# --- Commands ---

@click.command("design")
@click.option("-m", "--method", type=click.Choice(METHOD_CHOICES, case_sensitive=False), default=None,
              help="Design method. [default: from config]")
@click.option("-n", "--taps", type=int, default=None, help="Number of taps. [default: from config]")
@click.option("-b", "--bandwidth", type=float, default=None,
              help="Normalized bandwidth (0.5 = Nyquist). [default: from config]")
@click.pass_context
def design_cmd(ctx, method: Optional[str], taps: Optional[int], bandwidth: Optional[float]):
    """Design an FIR filter and print its taps."""
    defaults = _get_config(ctx).defaults
    method = method or defaults.design_method
    taps = taps if taps is not None else defaults.num_taps
    bandwidth = bandwidth if bandwidth is not None else defaults.bandwidth

    logger.info(f"Designing filter: method={method}, taps={taps}, bandwidth={bandwidth}")
    try:
        coefficients = design_filter(method, taps, bandwidth)
    except FirflowError as e:
        raise click.UsageError(f"Filter design failed: {e}")

    rows = [(i, float(tap)) for i, tap in enumerate(coefficients.numerator)]
    click.echo(tabulate(rows, headers=["index", "tap"], tablefmt="simple", floatfmt=".10f"))
    click.echo(f"Method: {coefficients.method.value}  Taps: {coefficients.num_taps}  "
               f"Sum: {coefficients.numerator.sum():.10f}")


@click.command("convolve")
@click.argument("first", type=str)
@click.argument("second", type=str)
@click.option("--parallel/--sequential", default=False, help=PARALLEL_OPTION_HELP)
@click.option("-w", "--workers", type=int, default=None, help=WORKERS_OPTION_HELP)
@click.pass_context
def convolve_cmd(ctx, first: str, second: str, parallel: bool, workers: Optional[int]):
    """Full linear convolution of two comma-separated sequences."""
    a = parse_sequence(first)
    b = parse_sequence(second)
    workers = _resolve_workers(ctx, parallel, workers)
    try:
        if workers is not None:
            with ParallelConvolver(num_workers=workers) as conv:
                result = conv.convolve(a, b)
        else:
            result = convolve(a, b)
    except FirflowError as e:
        raise click.UsageError(f"Convolution failed: {e}")
    click.echo(", ".join(str(v) for v in result.tolist()))


@click.command("apply")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("-o", "--output", type=click.Path(dir_okay=False), required=True,
              help="Output CSV file. Relative paths are placed under [paths] output_dir.")
@click.option("-c", "--column", type=str, default=None,
              help="Column holding the signal. [default: first numeric column]")
@click.option("-m", "--method", type=click.Choice(METHOD_CHOICES, case_sensitive=False), default=None,
              help="Design method. [default: from config]")
@click.option("-n", "--taps", type=int, default=None, help="Number of taps. [default: from config]")
@click.option("-b", "--bandwidth", type=float, default=None,
              help="Normalized bandwidth (0.5 = Nyquist). [default: from config]")
@click.option("--block-size", type=int, default=None, help="Samples per block. [default: from config]")
@click.option("--parallel/--sequential", default=False, help=PARALLEL_OPTION_HELP)
@click.option("-w", "--workers", type=int, default=None, help=WORKERS_OPTION_HELP)
@click.pass_context
def apply_cmd(
    ctx,
    input_file: str,
    output: str,
    column: Optional[str],
    method: Optional[str],
    taps: Optional[int],
    bandwidth: Optional[float],
    block_size: Optional[int],
    parallel: bool,
    workers: Optional[int],
):
    """Stream a CSV signal column through an FIR filter block by block."""
    config = _get_config(ctx)
    defaults = config.defaults
    method = method or defaults.design_method
    taps = taps if taps is not None else defaults.num_taps
    bandwidth = bandwidth if bandwidth is not None else defaults.bandwidth
    block_size = block_size if block_size is not None else defaults.block_size
    if block_size < 1:
        raise click.BadParameter("Block size must be >= 1.", param_hint="--block-size")
    workers = _resolve_workers(ctx, parallel, workers)

    input_path = Path(input_file)
    output_path = Path(output).expanduser()
    if not output_path.is_absolute():
        output_path = config.paths.output_dir / output_path
    df = pd.read_csv(input_path)
    if column is None:
        numeric = df.select_dtypes(include="number").columns
        if len(numeric) == 0:
            raise click.UsageError(f"No numeric column found in '{input_path.name}'.")
        column = numeric[0]
    elif column not in df.columns:
        raise click.UsageError(f"Column '{column}' not found in '{input_path.name}'. Available: {list(df.columns)}")

    try:
        signal = df[column].to_numpy(dtype=np.float64)
    except (ValueError, TypeError) as e:
        raise click.UsageError(f"Column '{column}' in '{input_path.name}' is not numeric: {e}")
    logger.info(f"Filtering column '{column}' ({signal.shape[0]} samples) from {input_path} "
                f"with {method}, {taps} taps, block size {block_size}.")

    try:
        pool = ParallelConvolver(num_workers=workers) if workers is not None else nullcontext()
        with pool:
            convolver = pool.convolve if workers is not None else None
            sfilter = StreamingFilter(taps, convolver=convolver)
            sfilter.design_filter(taps, 0, method, bandwidth)
            filtered = stream_blocks(sfilter, signal, block_size)
    except FirflowError as e:
        raise click.UsageError(f"Filtering failed: {e}")

    result = pd.DataFrame({column: signal, f"{column}_filtered": filtered})
    output_path.parent.mkdir(parents=True, exist_ok=True)
    result.to_csv(output_path, index=False)
    click.echo(f"Filtered {signal.shape[0]} samples from '{input_path.name}' into '{output_path}'.")
