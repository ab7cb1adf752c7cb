"""
Batch media ingestion for PrImBoard.

Walks a directory, adds each file and a square thumbnail to IPFS, classifies
the media type and registers a record with the catalog API.
"""

__version__ = "1.0.0"

from .errors import (
    IngestError,
    ConfigError,
    PreflightError,
    AuthError,
    StoreError,
    ThumbnailError,
    UnsupportedFormatError,
    SubmissionError,
)
from .models import ProbeResult, MediaType, Classification, Credentials, MediaRecord
from .config import IngestConfig
from .context import IngestContext
from .walker import FileWalker
from .probe import MediaProber
from .thumbnail_generator import ThumbnailGenerator, calc_target_dims
from .classifier import MediaClassifier, ProbeClassifier, ExtensionClassifier, AutoClassifier, get_classifier
from .ipfs_client import IpfsClient
from .catalog_client import CatalogClient
from .ingest_stats import IngestStats, PipelineState
from .ingest_progress import IngestProgress
from .pipeline import IngestPipeline

__all__ = [
    "IngestError",
    "ConfigError",
    "PreflightError",
    "AuthError",
    "StoreError",
    "ThumbnailError",
    "UnsupportedFormatError",
    "SubmissionError",
    "ProbeResult",
    "MediaType",
    "Classification",
    "Credentials",
    "MediaRecord",
    "IngestConfig",
    "IngestContext",
    "FileWalker",
    "MediaProber",
    "ThumbnailGenerator",
    "calc_target_dims",
    "MediaClassifier",
    "ProbeClassifier",
    "ExtensionClassifier",
    "AutoClassifier",
    "get_classifier",
    "IpfsClient",
    "CatalogClient",
    "IngestStats",
    "PipelineState",
    "IngestProgress",
    "IngestPipeline",
]
