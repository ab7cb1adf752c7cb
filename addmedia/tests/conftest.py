"""
Pytest fixtures for addmedia tests.
"""

import io
import json

import pytest


@pytest.fixture
def ingest_config():
    """Fixture providing an ingestion config."""
    from addmedia.config import IngestConfig
    
    return IngestConfig(
        ipfs_gateway='https://gateway.example.com/ipfs/',
        ipfs_node_api='localhost:5001',
        primboard_host='catalog.example.com:8080',
    )


@pytest.fixture
def config_file(ingest_config, tmp_path):
    """Fixture providing a config file on disk."""
    filepath = tmp_path / "env.json"
    filepath.write_text(json.dumps({
        'ipfs_gateway': ingest_config.ipfs_gateway,
        'ipfs_node_api': ingest_config.ipfs_node_api,
        'primboard_host': ingest_config.primboard_host,
    }))
    return str(filepath)


@pytest.fixture
def mock_session():
    """Fixture providing a mocked requests session."""
    from unittest.mock import MagicMock
    return MagicMock()


@pytest.fixture
def context(ingest_config, mock_session):
    """Fixture providing a context with a mocked session."""
    from addmedia.context import IngestContext
    return IngestContext(config=ingest_config, session=mock_session)


@pytest.fixture
def make_response():
    """Fixture building fake HTTP responses."""
    from unittest.mock import MagicMock
    
    def _make(status_code=200, text=''):
        response = MagicMock()
        response.status_code = status_code
        response.text = text
        response.ok = 200 <= status_code < 300
        return response
    
    return _make


@pytest.fixture
def make_image_file(tmp_path):
    """Fixture writing a synthetic image and returning its path."""
    from PIL import Image
    
    def _make(name='image.jpg', size=(200, 100), fmt='JPEG', mode='RGB', color='red'):
        img = Image.new(mode, size, color=color)
        path = tmp_path / name
        img.save(path, format=fmt)
        return str(path)
    
    return _make


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes."""
    from PIL import Image
    
    img = Image.new('RGB', (200, 100), color='red')
    buffer = io.BytesIO()
    img.save(buffer, format='JPEG')
    return buffer.getvalue()


@pytest.fixture
def media_dir(make_image_file, tmp_path):
    """Fixture providing a directory with three images in two folders."""
    (tmp_path / 'media' / 'b').mkdir(parents=True)
    make_image_file('media/a.jpg', size=(200, 100))
    make_image_file('media/b/c.png', size=(100, 300), fmt='PNG')
    make_image_file('media/b/d.jpg', size=(64, 64))
    return str(tmp_path / 'media')


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
