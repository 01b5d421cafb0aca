"""Testing utilities and fakes for the background removal pipeline."""

from .fakes import (
    FakeS3Client,
    FakeLogger,
    FakeRemover,
    FakeRemoveBgSession,
    FakeResponse,
    S3Object,
    S3Bucket,
    create_test_image,
    setup_test_s3_environment,
)

__all__ = [
    "FakeS3Client",
    "FakeLogger",
    "FakeRemover",
    "FakeRemoveBgSession",
    "FakeResponse",
    "S3Object",
    "S3Bucket",
    "create_test_image",
    "setup_test_s3_environment",
]
