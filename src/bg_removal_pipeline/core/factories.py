"""Factory classes for creating configured service instances."""

from typing import Optional

import boto3

from ..clients.removebg import RemoveBgClient
from .exceptions import ConfigurationError
from .models import PipelineConfig
from .observability import StructuredLogger
from .protocols import BackgroundRemover, LoggerProtocol, S3ClientProtocol
from .services import BatchDriver, ResumableImageProcessor, S3FileDiscoveryService


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str = "pipeline") -> LoggerProtocol:
        """Create a configured logger instance."""
        return StructuredLogger(name)


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(config: PipelineConfig) -> S3ClientProtocol:
        """Create an S3 client for the configured R2 endpoint."""
        if not config.access_key_id or not config.secret_access_key:
            raise ConfigurationError(
                "ACCESS_KEY_ID and SECRET_ACCESS_KEY environment variables must be set"
            )

        session = boto3.Session()
        return session.client(  # type: ignore
            "s3",
            endpoint_url=config.endpoint_url,
            region_name=config.region,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
        )


class RemoveBgClientFactory:
    """Factory for creating remove.bg clients."""

    @staticmethod
    def create_client(config: PipelineConfig, logger: LoggerProtocol) -> RemoveBgClient:
        return RemoveBgClient(
            api_key=config.removebg_api_key,
            logger=logger,
            api_url=config.api_url,
            max_retries=config.max_retries,
            timeout=config.request_timeout,
        )


class ProcessingPipelineFactory:
    """Factory for creating the complete processing pipeline."""

    @staticmethod
    def create_pipeline(
        config: PipelineConfig,
        s3_client: Optional[S3ClientProtocol] = None,
        remover: Optional[BackgroundRemover] = None,
        logger: Optional[LoggerProtocol] = None,
    ) -> BatchDriver:
        """Create a fully configured batch driver."""
        if logger is None:
            logger = LoggerFactory.create_logger()

        if s3_client is None:
            s3_client = S3ClientFactory.create_s3_client(config)

        if remover is None:
            remover = RemoveBgClientFactory.create_client(config, logger)

        file_discovery = S3FileDiscoveryService(s3_client, logger)
        processor = ResumableImageProcessor(
            s3_client, remover, config.output_dir, logger
        )

        return BatchDriver(
            config=config,
            file_discovery=file_discovery,
            processor=processor,
            logger=logger,
        )
