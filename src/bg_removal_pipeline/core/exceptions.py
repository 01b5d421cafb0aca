"""Custom exceptions for the background removal pipeline."""

from __future__ import annotations


class BgRemovalPipelineError(Exception):
    """Base exception for all pipeline errors."""


class ConfigurationError(BgRemovalPipelineError):
    """Error raised when a required credential or setting is missing."""


class S3Error(BgRemovalPipelineError):
    """Error raised for S3 related failures."""


class FetchError(BgRemovalPipelineError):
    """Error raised when the storage response carries no body."""


class ApiError(BgRemovalPipelineError):
    """Error raised for a non-success, non-rate-limit response from remove.bg."""

    def __init__(self, status_code: int, reason: str, body: str):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"{status_code}: {reason} - {body}")


class RetryExhausted(BgRemovalPipelineError):
    """Error raised after repeated rate limiting used up every attempt."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Failed after {attempts} retries due to rate limiting")
