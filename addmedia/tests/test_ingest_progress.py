"""Tests for IngestProgress class."""

import logging

from addmedia.ingest_progress import IngestProgress
from addmedia.ingest_stats import IngestStats


class TestIngestProgress:
    """Tests for IngestProgress class."""
    
    def test_show_files_ok(self, capsys):
        """Test per-file output on success."""
        progress = IngestProgress(show_files=True)
        
        progress.on_file_processed('a.jpg', success=True, content_hash='QmA')
        
        assert '[OK] a.jpg -> QmA' in capsys.readouterr().out
    
    def test_show_files_error(self, capsys):
        progress = IngestProgress(show_files=True)
        
        progress.on_file_processed('a.jpg', success=False, error='boom')
        
        assert '[ERROR] a.jpg -> boom' in capsys.readouterr().out
    
    def test_quiet_without_show_files(self, capsys):
        progress = IngestProgress(show_files=False)
        
        progress.on_file_processed('a.jpg', success=True, content_hash='QmA')
        
        assert capsys.readouterr().out == ''
    
    def test_progress_logged_at_interval(self, caplog):
        """Test summaries are logged every log_interval files."""
        progress = IngestProgress(log_interval=2, logger=logging.getLogger('test.progress'))
        stats = IngestStats(total_files=5)
        
        with caplog.at_level(logging.INFO, logger='test.progress'):
            stats.processed = 1
            progress(stats)
            stats.processed = 2
            progress(stats)
        
        messages = [r.getMessage() for r in caplog.records]
        assert len(messages) == 1
        assert messages[0].startswith('Progress: 2/5 added')
    
    def test_on_start_logs_file_count(self, caplog):
        progress = IngestProgress(logger=logging.getLogger('test.progress'))
        
        with caplog.at_level(logging.INFO, logger='test.progress'):
            progress.on_start(IngestStats(total_files=3))
        
        assert 'Found 3 files' in caplog.text
