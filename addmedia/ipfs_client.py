"""
IpfsClient - Puts files into IPFS through a node's HTTP API.
"""

import json
import logging
from typing import BinaryIO, Optional

import requests

from .context import IngestContext
from .errors import StoreError


class IpfsClient:
    """
    Content store client.
    
    IPFS derives the content id from the bytes, so adding the same file
    twice returns the same id.
    """
    
    ADD_ENDPOINT = '/api/v0/add'
    
    def __init__(
        self,
        context: IngestContext,
        timeout: float = 300.0,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize IPFS client.
        
        Args:
            context: Run context (config and HTTP session)
            timeout: Seconds to wait for an upload
            logger: Optional logger instance
        """
        self.context = context
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
    
    @property
    def api_url(self) -> str:
        return self.context.config.node_api_url
    
    def add(self, stream: BinaryIO, filename: str = 'file') -> str:
        """
        Upload a byte stream.
        
        Args:
            stream: Binary file-like object
            filename: Name sent with the multipart upload
            
        Returns:
            Content id of the uploaded bytes
            
        Raises:
            StoreError: If the upload failed or returned no content id
        """
        url = self.api_url + self.ADD_ENDPOINT
        try:
            response = self.context.session.post(
                url,
                params={'pin': 'true'},
                files={'file': (filename, stream, 'application/octet-stream')},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise StoreError(f"Upload of {filename} to {url} failed: {e}") from e
        
        if not response.ok:
            raise StoreError(
                f"Content store rejected {filename}: HTTP {response.status_code} {response.text.strip()}"
            )
        
        cid = self._parse_hash(response.text)
        if not cid:
            raise StoreError(f"Content store returned no content id for {filename}")
        
        self.logger.debug(f"Stored {filename} as {cid}")
        return cid
    
    def url_for(self, cid: str) -> str:
        """Gateway URL for a content id."""
        return self.context.config.ipfs_gateway + cid
    
    @staticmethod
    def _parse_hash(body: str) -> Optional[str]:
        # One JSON object per line; the last one describes the added root
        lines = [line for line in body.splitlines() if line.strip()]
        if not lines:
            return None
        try:
            entry = json.loads(lines[-1])
        except ValueError as e:
            raise StoreError(f"Unexpected content store response: {lines[-1][:200]}") from e
        if not isinstance(entry, dict):
            return None
        return entry.get('Hash') or None
