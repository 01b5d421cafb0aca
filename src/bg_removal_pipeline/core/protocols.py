"""Protocol definitions for dependency injection and testability."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Protocol

from .models import BatchSummary, ItemOutcome


class S3ClientProtocol(Protocol):
    """Protocol for the S3 client operations the pipeline uses."""

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        ...

    def get_paginator(self, operation_name: str) -> Any:
        """Get paginator for S3 operations."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


class BackgroundRemover(Protocol):
    """Protocol for a background removal backend."""

    def submit(self, image_bytes: bytes, display_name: str) -> bytes:
        """Return the image with its background removed."""
        ...


class FileDiscoveryService(ABC):
    """Abstract service for discovering files to process."""

    @abstractmethod
    def discover_files(self, bucket: str, prefix: str) -> List[str]:
        """Discover files to process, in processing order."""
        ...


class ItemProcessor(ABC):
    """Abstract processor for a single object key."""

    @abstractmethod
    def process(self, key: str, bucket: str, folder_prefix: str) -> ItemOutcome:
        """Process a single key."""
        ...


class BatchRunner(ABC):
    """Abstract batch runner."""

    @abstractmethod
    def run(self) -> BatchSummary:
        """Run one pass over the configured bucket and prefix."""
        ...
