"""
IngestPipeline - Sequences preflight, login and per-file ingestion.
"""

import io
import logging
import os
from typing import Callable, List, Optional

from .catalog_client import CatalogClient
from .classifier import MediaClassifier
from .context import IngestContext
from .errors import IngestError
from .ingest_progress import IngestProgress
from .ingest_stats import IngestStats, PipelineState
from .ipfs_client import IpfsClient
from .models import Credentials, MediaRecord
from .thumbnail_generator import ThumbnailGenerator
from .walker import FileWalker


class IngestPipeline:
    """
    Runs one ingestion batch.
    
    State goes IDLE -> PREFLIGHT_CHECKED -> AUTHENTICATED -> INGESTING and
    ends in DONE or ABORTED. Each file is uploaded, thumbnailed, classified
    and submitted before the next one starts, in the walker's order.
    
    With fail_fast (the default) the first failing file aborts the batch and
    nothing after it is attempted. Without it, failures are collected in the
    stats and the batch carries on. Preflight and login failures always
    abort.
    """
    
    def __init__(
        self,
        context: IngestContext,
        store: IpfsClient,
        thumbnail_generator: ThumbnailGenerator,
        classifier: MediaClassifier,
        catalog: CatalogClient,
        walker: Optional[FileWalker] = None,
        fail_fast: bool = True,
        preflight_timeout: float = 2.0,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.
        
        Args:
            context: Run context shared with the clients
            store: Content store client
            thumbnail_generator: Thumbnail generator instance
            classifier: Classification policy
            catalog: Catalog client
            walker: File walker (default: FileWalker())
            fail_fast: Abort the batch on the first failing file
            preflight_timeout: Seconds allowed for the catalog TCP check
            logger: Optional logger instance
        """
        self.context = context
        self.store = store
        self.thumbnails = thumbnail_generator
        self.classifier = classifier
        self.catalog = catalog
        self.logger = logger or logging.getLogger(__name__)
        self.walker = walker or FileWalker(logger=self.logger)
        self.fail_fast = fail_fast
        self.preflight_timeout = preflight_timeout
        self.stats = IngestStats()
    
    @property
    def state(self) -> PipelineState:
        return self.stats.state
    
    def run(
        self,
        root: str,
        credentials_provider: Callable[[], Credentials],
        progress: Optional[IngestProgress] = None
    ) -> IngestStats:
        """
        Ingest every file under root.
        
        Args:
            root: Directory (or single file) to ingest
            credentials_provider: Called once, after the preflight check,
                to get the login
            progress: Optional progress tracker
            
        Returns:
            IngestStats; state is DONE or ABORTED
        """
        self.stats = IngestStats()
        
        try:
            self.catalog.check_host(self.preflight_timeout)
            self.stats.state = PipelineState.PREFLIGHT_CHECKED
            
            self.catalog.login(credentials_provider())
            self.stats.state = PipelineState.AUTHENTICATED
            
            files = self.walker.collect(root)
        except (IngestError, OSError) as e:
            return self._abort(e, progress)
        
        return self.ingest_files(files, progress)
    
    def ingest_files(self, files: List[str], progress: Optional[IngestProgress] = None) -> IngestStats:
        """Ingest the given files in order. Requires a logged-in context."""
        if not self.context.authenticated:
            return self._abort(IngestError("Not authenticated"), progress)
        
        self.stats.state = PipelineState.INGESTING
        self.stats.total_files = len(files)
        if progress:
            progress.on_start(self.stats)
        else:
            self.logger.info(f"Found {len(files)} files")
        
        for path in files:
            try:
                record = self.ingest_file(path)
            except (IngestError, OSError) as e:
                error_msg = f"Error processing {path}: {e}"
                self.stats.errors += 1
                self.stats.error_details.append(error_msg)
                if progress:
                    progress.on_file_processed(path, success=False, error=str(e))
                if self.fail_fast:
                    return self._abort(e, progress, message=error_msg)
                self.logger.error(error_msg)
                continue
            
            self.stats.processed += 1
            if progress:
                progress.on_file_processed(path, success=True, content_hash=record.content_hash)
                progress.on_progress_update(self.stats)
            else:
                self.logger.info(
                    f"Added: {path} -> {record.content_hash} "
                    f"[{self.stats.processed}/{self.stats.total_files}]"
                )
        
        self.stats.state = PipelineState.DONE
        if progress:
            progress.on_finish(self.stats)
        return self.stats
    
    def ingest_file(self, path: str) -> MediaRecord:
        """
        Upload, thumbnail, classify and submit a single file.
        
        Returns:
            The submitted record
        """
        name = os.path.basename(path)
        
        self.logger.debug(f"Uploading: {path}")
        with open(path, 'rb') as f:
            content_hash = self.store.add(f, name)
        self.stats.bytes_uploaded += os.path.getsize(path)
        
        self.logger.debug(f"Generating thumbnail: {path}")
        thumb_data, probe = self.thumbnails.generate(path)
        thumb_hash = self.store.add(io.BytesIO(thumb_data), f"{name}.thumb.jpg")
        self.stats.bytes_uploaded += len(thumb_data)
        
        classification = self.classifier.classify(path, probe)
        self.logger.debug(f"Classified {path} as {classification.type.value or 'unknown'} ({classification.format})")
        
        record = MediaRecord.build(
            content_hash=content_hash,
            thumbnail_hash=thumb_hash,
            gateway=self.context.config.ipfs_gateway,
            classification=classification,
            probe=probe,
            timestamp=int(os.path.getmtime(path)),
        )
        self.catalog.submit(record)
        return record
    
    def _abort(
        self,
        error: Exception,
        progress: Optional[IngestProgress],
        message: Optional[str] = None
    ) -> IngestStats:
        self.stats.state = PipelineState.ABORTED
        self.stats.abort_reason = message or str(error)
        self.logger.error(f"Aborting: {self.stats.abort_reason}")
        if progress:
            progress.on_finish(self.stats)
        return self.stats
