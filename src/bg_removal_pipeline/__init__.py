"""Batch background removal for images stored in S3-compatible buckets."""

__version__ = "0.1.0"
