"""
Error kinds raised by the ingestion components.
"""

from typing import Optional


class IngestError(Exception):
    """Base class for every error the pipeline knows how to report."""


class ConfigError(IngestError):
    """Config file missing, unreadable or incomplete."""


class PreflightError(IngestError):
    """Catalog host is not reachable."""


class AuthError(IngestError):
    """Login was rejected by the catalog."""

    def __init__(self, message: str, status_code: int = 0, body: str = ''):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class StoreError(IngestError):
    """Upload to the content store failed."""


class ThumbnailError(IngestError):
    """Thumbnail could not be decoded, resized or encoded."""


class UnsupportedFormatError(ThumbnailError):
    """The stream is not decodable as media."""


class SubmissionError(IngestError):
    """The catalog did not accept a media record."""

    def __init__(self, message: str, status_code: int = 0, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
