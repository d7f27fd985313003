# firflow/config/models.py

"""
Pydantic models for the structure and validation of the firflow
configuration (firflow.toml). Uses Pydantic V2 syntax.
"""

from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from firflow.core.design import DesignMethod

# --- Helper Functions ---

def _resolve_path(path: Union[str, Path]) -> Path:
    """Resolves and expands user paths."""
    return Path(path).expanduser().resolve()

# --- Model Definitions ---

class DefaultsConfig(BaseModel):
    """Default filter design and streaming parameters."""
    num_taps: int = Field(31, ge=1, description="Default number of filter taps.")
    design_method: str = Field("hamming", description="Default design method (moving_average, bartlett, hamming, hann).")
    bandwidth: float = Field(0.25, gt=0, description="Default normalized bandwidth (0.5 = Nyquist).")
    block_size: int = Field(1024, ge=1, description="Default block size (samples) for streaming.")

    @field_validator('design_method')
    @classmethod
    def check_design_method(cls, value: str) -> str:
        """Normalize and validate the design method name."""
        # UnsupportedDesign is a ValueError, which pydantic reports as a validation error.
        return DesignMethod.parse(value).value

class ParallelConfig(BaseModel):
    """Worker pool settings for the parallel convolution kernel."""
    num_workers: int = Field(4, ge=1, description="Number of worker threads.")

class PathsConfig(BaseModel):
    """Configuration for file paths used by firflow."""
    output_dir: Path = Field(default=Path("./firflow_output"), description="Default directory for saving results.")
    log_directory: Path = Field(default=Path("./firflow_logs"), description="Directory for log files.")

    @field_validator('output_dir', 'log_directory', mode='before')
    @classmethod
    def resolve_paths_before_validation(cls, value: Any) -> Path:
        """Resolves paths before Pydantic validates them."""
        if isinstance(value, (str, Path)):
            return _resolve_path(value)
        return value

class LoggingConfig(BaseModel):
    """Logging configuration settings."""
    log_file_enabled: bool = Field(False, description="Enable/disable persistent file logging.")
    log_filename_template: str = Field("firflow_run_{timestamp:%Y%m%d_%H%M%S}.log", description="Naming pattern for log files.")
    log_level_file: str = Field("DEBUG", description="Minimum level for file logs (DEBUG, INFO, WARNING, ERROR, CRITICAL).")
    log_format: str = Field("%(asctime)s [%(levelname)-8s] %(name)-30s - %(message)s", description="Format string for file log entries.")

    @field_validator('log_level_file')
    @classmethod
    def check_log_level(cls, value: str) -> str:
        """Validate log level strings."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in allowed_levels:
            raise ValueError(f"Invalid log level '{value}'. Must be one of {allowed_levels}")
        return upper_value

class FirflowConfig(BaseModel):
    """Root configuration model for firflow."""
    model_config = ConfigDict(
        extra='ignore',
        validate_assignment=True
    )

    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    parallel: ParallelConfig = Field(default_factory=ParallelConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
