"""Service implementations for the background removal pipeline."""

import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, List

from .error_handling import BatchOperationContextManager, with_error_handling
from .exceptions import ConfigurationError, FetchError
from .models import BatchSummary, ItemOutcome, PipelineConfig, ProcessingResult
from .observability import LogContext
from .paths import calculate_output_path, is_supported_image, needs_conversion
from .protocols import (
    BackgroundRemover,
    BatchRunner,
    FileDiscoveryService,
    ItemProcessor,
    LoggerProtocol,
    S3ClientProtocol,
)


def write_output_file(file_path: Path, data: bytes) -> None:
    """
    Write data to file_path so the final name only ever holds complete files.

    The bytes go to a ".part" sibling first and are renamed into place; a
    failed write removes the partial file, so the key is retried next run.
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)
    partial_path = file_path.with_name(file_path.name + ".part")
    try:
        partial_path.write_bytes(data)
        os.replace(partial_path, file_path)
    finally:
        if partial_path.exists():
            partial_path.unlink()


class S3FileDiscoveryService(FileDiscoveryService):
    """Service for discovering image files in S3, newest listing entries first."""

    def __init__(self, s3_client: S3ClientProtocol, logger: LoggerProtocol):
        self._s3_client = s3_client
        self._logger = logger

    @with_error_handling
    def list_keys(self, bucket: str, prefix: str) -> List[str]:
        """List every key under the prefix, across all pages."""
        keys = []
        paginator = self._s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
            for obj in page.get("Contents", []):
                key = obj.get("Key")
                if key:
                    keys.append(key)
        return keys

    def discover_files(self, bucket: str, prefix: str) -> List[str]:
        """Discover image files and return them in reverse listing order."""
        self._logger.debug(f"Discovering files in s3://{bucket}/{prefix}")

        keys = self.list_keys(bucket, prefix)
        image_keys = [key for key in keys if is_supported_image(key)]
        image_keys.reverse()

        self._logger.debug(
            f"Listed {len(keys)} objects, {len(image_keys)} supported images"
        )
        return image_keys


class ResumableImageProcessor(ItemProcessor):
    """Fetches one image, removes its background and writes it to disk."""

    def __init__(
        self,
        s3_client: S3ClientProtocol,
        remover: BackgroundRemover,
        output_dir: Path,
        logger: LoggerProtocol,
    ):
        self._s3_client = s3_client
        self._remover = remover
        self._output_dir = Path(output_dir)
        self._logger = logger

    def output_path_for(self, key: str, folder_prefix: str) -> Path:
        return calculate_output_path(key, folder_prefix, self._output_dir)

    @with_error_handling
    def _download(self, bucket: str, key: str) -> bytes:
        response: Dict[str, Any] = self._s3_client.get_object(Bucket=bucket, Key=key)
        body = response.get("Body")
        if body is None:
            raise FetchError(f"Failed to download {key} from s3://{bucket}")
        return body.read()

    def process(self, key: str, bucket: str, folder_prefix: str) -> ItemOutcome:
        """
        Process a single object key.

        An existing output file means the key was done by an earlier run, in
        which case nothing is fetched, submitted or written.

        Raises:
            Any error from the download or the removal step, after logging it.
        """
        log_context = LogContext(
            operation="process_image", component="resumable_image_processor"
        ).with_metadata(key=key)
        file_path = self.output_path_for(key, folder_prefix)

        if file_path.exists():
            self._logger.info(f"Skipping {key} (already processed)", log_context)
            return ItemOutcome.SKIPPED

        try:
            self._logger.info(f"Processing: {key}", log_context)

            image_bytes = self._download(bucket, key)
            processed_bytes = self._remover.submit(image_bytes, key)

            if needs_conversion(key):
                self._logger.info(
                    f"Converting {key} -> {file_path.name}",
                    log_context.with_operation("convert"),
                )

            write_output_file(file_path, processed_bytes)

            self._logger.info(f"Successfully saved: {file_path}", log_context)
            return ItemOutcome.PROCESSED

        except Exception as e:
            self._logger.error(
                f"Error processing {key}: {e}",
                log_context.with_metadata(error_type=type(e).__name__),
            )
            raise


class BatchDriver(BatchRunner):
    """Runs a full sequential pass over the configured bucket and prefix."""

    def __init__(
        self,
        config: PipelineConfig,
        file_discovery: FileDiscoveryService,
        processor: ItemProcessor,
        logger: LoggerProtocol,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._config = config
        self._file_discovery = file_discovery
        self._processor = processor
        self._logger = logger
        self._sleep = sleep

    def run(self) -> BatchSummary:
        """
        Process every discovered image, one at a time.

        A failing item is logged and the loop moves on. ConfigurationError is
        the exception: no item can succeed without credentials, so it aborts
        the run.
        """
        start_time = time.time()
        config = self._config

        image_keys = self._file_discovery.discover_files(
            config.bucket, config.folder_prefix
        )
        self._logger.info(
            f"Found {len(image_keys)} images to process (starting from bottom)"
        )

        summary = BatchSummary(total_items=len(image_keys))

        with BatchOperationContextManager(
            operation_name=f"Background removal for s3://{config.bucket}/{config.folder_prefix}"
        ) as batch_manager:
            for index, key in enumerate(image_keys):
                result = self._run_item(key, batch_manager)
                summary.results.append(result)

                if result.outcome == ItemOutcome.PROCESSED:
                    summary.processed_count += 1
                elif result.outcome == ItemOutcome.SKIPPED:
                    summary.skipped_count += 1
                else:
                    summary.error_count += 1

                if index < len(image_keys) - 1:
                    self._sleep(config.request_delay)

        summary.processing_time = time.time() - start_time
        self._logger.info(
            f"Finished processing {summary.total_items} images",
            processed=summary.processed_count,
            skipped=summary.skipped_count,
            failed=summary.error_count,
        )
        return summary

    def _run_item(
        self, key: str, batch_manager: BatchOperationContextManager
    ) -> ProcessingResult:
        config = self._config
        item_start = time.time()
        result = ProcessingResult(source_key=key)

        try:
            result.outcome = self._processor.process(
                key, config.bucket, config.folder_prefix
            )
            result.output_path = str(
                calculate_output_path(key, config.folder_prefix, config.output_dir)
            )
        except ConfigurationError:
            raise
        except Exception as e:
            result.outcome = ItemOutcome.FAILED
            result.error = str(e)
            batch_manager.add_error(error_message=str(e), item_identifier=key)
            self._logger.error(
                f"Failed to process {key}, continuing with next image..."
            )

        result.processing_time = time.time() - item_start
        return result
