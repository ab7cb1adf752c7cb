"""
IngestProgress - Reports ingestion progress through the log.
"""

import logging
from typing import Optional

from .ingest_stats import IngestStats


class IngestProgress:
    """
    Tracks and reports progress, optionally one line per file.
    """
    
    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 100,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.
        
        Args:
            show_files: If True, print each file as it's processed
            log_interval: Log summary progress every N files (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.last_logged = 0
    
    def on_start(self, stats: IngestStats) -> None:
        self.logger.info(f"Found {stats.total_files} files")
        self.logger.info("Start adding files...")
    
    def on_file_processed(
        self,
        path: str,
        success: bool,
        content_hash: Optional[str] = None,
        error: Optional[str] = None
    ) -> None:
        """
        Called when a file is done, successfully or not.
        
        Args:
            path: The file
            success: Whether ingestion succeeded
            content_hash: Content id of the original (if success)
            error: Error message (if failed)
        """
        if self.show_files:
            if success:
                print(f"  [OK] {path} -> {content_hash}")
            else:
                print(f"  [ERROR] {path} -> {error or 'failed'}")
    
    def on_progress_update(self, stats: IngestStats) -> None:
        """Log a summary line every log_interval files."""
        done = stats.completed_count
        
        if not self.show_files and done - self.last_logged >= self.log_interval:
            self.last_logged = done
            self.logger.info(
                f"Progress: {stats.processed}/{stats.total_files} added, {stats.errors} errors "
                f"({stats.rate_per_minute:.1f}/min, {stats.remaining_count} left)"
            )
    
    def on_finish(self, stats: IngestStats) -> None:
        self.logger.info(
            f"Finished ({stats.state.value}): {stats.processed} added, {stats.errors} errors "
            f"in {stats.elapsed_seconds:.1f}s"
        )
    
    def __call__(self, stats: IngestStats) -> None:
        """Allow use as callback for stats updates."""
        self.on_progress_update(stats)
