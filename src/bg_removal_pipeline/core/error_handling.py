"""Error handling helpers shared by the pipeline services."""

import functools
from typing import Any, Callable, Dict, List, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import BgRemovalPipelineError, S3Error
from .logging_config import get_logger

F = TypeVar("F", bound=Callable[..., Any])


def with_error_handling(func: F) -> F:
    """
    A decorator to wrap storage calls with standardized error handling.

    Pipeline errors pass through untouched. botocore errors are logged and
    re-raised as S3Error; anything else is logged and re-raised as is.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = get_logger(func.__module__ + "." + func.__name__)
        try:
            return func(*args, **kwargs)
        except BgRemovalPipelineError:
            raise
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error in '{func.__name__}': {e}", exc_info=True)
            raise S3Error(f"S3 operation failed in {func.__name__}: {e}") from e
        except Exception as e:
            logger.error(f"Error in '{func.__name__}': {e}", exc_info=True)
            raise

    return wrapper  # type: ignore[return-value]


class BatchOperationContextManager:
    """
    Context manager for batch operations to collect and summarize errors.
    """

    def __init__(self, operation_name: str = "Batch Operation"):
        self.operation_name = operation_name
        self.errors: List[Dict[str, str]] = []
        self.logger = get_logger(
            self.__class__.__module__ + "." + self.__class__.__name__
        )

    def __enter__(self) -> "BatchOperationContextManager":
        self.logger.info(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb),
            )
        elif self.errors:
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.errors)} error(s)."
            )
            for i, error_detail in enumerate(self.errors):
                self.logger.error(
                    f"  Error {i + 1}/{len(self.errors)} for item "
                    f"'{error_detail['item']}': {error_detail['error']}"
                )
        else:
            self.logger.info(f"{self.operation_name} completed successfully.")

        # Never suppress: unhandled exceptions propagate to the caller
        return False

    def add_error(self, error_message: str, item_identifier: str = "Unknown item") -> None:
        """
        Report an error for a specific item.

        Args:
            error_message: The error message or exception string.
            item_identifier: The item that failed (e.g. an object key).
        """
        self.errors.append({"item": item_identifier, "error": str(error_message)})
        self.logger.debug(
            f"Error added for item '{item_identifier}' in {self.operation_name}: {error_message}"
        )
