"""
IngestStats - Statistics for an ingestion run.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class PipelineState(str, Enum):
    """Where a run currently is."""
    IDLE = 'idle'
    PREFLIGHT_CHECKED = 'preflight_checked'
    AUTHENTICATED = 'authenticated'
    INGESTING = 'ingesting'
    DONE = 'done'
    ABORTED = 'aborted'


@dataclass
class IngestStats:
    """
    Statistics for an ingestion run.
    
    Attributes:
        total_files: Files found under the root
        processed: Files fully ingested (uploaded and submitted)
        errors: Files that failed
        bytes_uploaded: Bytes sent to the content store (originals and thumbnails)
        start_time: Start timestamp
        error_details: List of error messages
        state: Pipeline state at the time of reading
        abort_reason: Message of the error that aborted the run
    """
    total_files: int = 0
    processed: int = 0
    errors: int = 0
    bytes_uploaded: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)
    state: PipelineState = PipelineState.IDLE
    abort_reason: Optional[str] = None
    
    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time
    
    @property
    def rate_per_minute(self) -> float:
        """Files ingested per minute."""
        elapsed = self.elapsed_seconds
        if elapsed > 0:
            return self.processed / elapsed * 60
        return 0.0
    
    @property
    def completed_count(self) -> int:
        """Total completed (processed + errors)."""
        return self.processed + self.errors
    
    @property
    def remaining_count(self) -> int:
        """Files not attempted yet."""
        return self.total_files - self.completed_count
    
    @property
    def succeeded(self) -> bool:
        """True when the run finished and nothing failed."""
        return self.state == PipelineState.DONE and self.errors == 0
