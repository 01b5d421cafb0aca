"""Core utilities and shared components for the background removal pipeline."""

from .logging_config import configure_package_logging, get_logger
from .exceptions import (
    BgRemovalPipelineError,
    ApiError,
    ConfigurationError,
    FetchError,
    RetryExhausted,
    S3Error,
)
from .models import (
    BatchSummary,
    ItemOutcome,
    PipelineConfig,
    ProcessingResult,
)
from .paths import calculate_output_path, is_supported_image

__all__ = [
    "PipelineConfig",
    "ItemOutcome",
    "ProcessingResult",
    "BatchSummary",
    "calculate_output_path",
    "is_supported_image",
    "configure_package_logging",
    "get_logger",
    "BgRemovalPipelineError",
    "ApiError",
    "ConfigurationError",
    "FetchError",
    "RetryExhausted",
    "S3Error",
]
