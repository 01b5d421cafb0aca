"""Shared data models for the background removal pipeline."""

import os
from enum import Enum
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


R2_ENDPOINT_URL = "https://cd3f38fcaf8dca226a6c08ebc2616089.r2.cloudflarestorage.com"
REMOVE_BG_API_URL = "https://api.remove.bg/v1.0/removebg"


class PipelineConfig(BaseModel):
    """Configuration for a batch run, built once at startup."""

    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    removebg_api_key: Optional[str] = None

    endpoint_url: str = R2_ENDPOINT_URL
    region: str = "auto"
    bucket: str = "harmony"
    folder_prefix: str = "recommendation/eat/"
    output_dir: Path = Field(default_factory=lambda: Path.cwd() / "processed-images")

    api_url: str = REMOVE_BG_API_URL
    max_retries: int = Field(default=5, ge=1)
    request_delay: float = Field(default=3.0, ge=0)
    request_timeout: float = 60.0

    @classmethod
    def from_env(cls, **overrides) -> "PipelineConfig":
        """
        Build a configuration from the process environment.

        A `.env` file in the working directory is loaded first; variables
        already present in the environment win over the file.

        Environment Variables:
            ACCESS_KEY_ID: Storage access key
            SECRET_ACCESS_KEY: Storage secret key
            REMOVE_BG_API_KEY: remove.bg API key
        """
        load_dotenv()
        values = {
            "access_key_id": os.getenv("ACCESS_KEY_ID"),
            "secret_access_key": os.getenv("SECRET_ACCESS_KEY"),
            "removebg_api_key": os.getenv("REMOVE_BG_API_KEY"),
        }
        values.update(overrides)
        return cls(**values)


class ItemOutcome(str, Enum):
    """What happened to a single object key."""

    PROCESSED = "processed"
    SKIPPED = "skipped"
    FAILED = "failed"


class ProcessingResult(BaseModel):
    """Result of processing a single image."""

    source_key: str
    output_path: str = ""
    outcome: ItemOutcome = ItemOutcome.FAILED
    error: str = ""
    processing_time: float = 0.0


class BatchSummary(BaseModel):
    """Totals for one batch run."""

    total_items: int = 0
    processed_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    processing_time: float = 0.0
    results: List[ProcessingResult] = Field(default_factory=list)
