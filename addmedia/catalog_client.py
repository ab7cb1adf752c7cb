"""
CatalogClient - Talks to the PrImBoard catalog API.
"""

import logging
import socket
import sys
from typing import Optional, TextIO

import requests

from .context import IngestContext
from .errors import AuthError, PreflightError, SubmissionError
from .models import Credentials, MediaRecord


class CatalogClient:
    """
    Reachability check, login and media submission against the catalog.
    """
    
    LOGIN_ENDPOINT = '/api/v1/login'
    MEDIA_ENDPOINT = '/api/v1/media'
    
    def __init__(
        self,
        context: IngestContext,
        timeout: float = 30.0,
        echo: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize catalog client.
        
        Args:
            context: Run context (config and HTTP session)
            timeout: Seconds to wait for an API response
            echo: Stream a rejected login's response body is copied to
                (default: stdout)
            logger: Optional logger instance
        """
        self.context = context
        self.timeout = timeout
        self.echo = echo
        self.logger = logger or logging.getLogger(__name__)
    
    @property
    def base_url(self) -> str:
        return self.context.config.catalog_url
    
    def check_host(self, timeout: float = 2.0) -> None:
        """
        Open and close a TCP connection to the catalog host.
        
        Raises:
            PreflightError: If the host can't be reached within timeout
        """
        host, port = self.context.config.catalog_address
        try:
            conn = socket.create_connection((host, port), timeout=timeout)
        except OSError as e:
            raise PreflightError(f"Catalog host {host}:{port} is not reachable: {e}") from e
        conn.close()
        self.logger.debug(f"Catalog host {host}:{port} is reachable")
    
    def login(self, credentials: Credentials) -> None:
        """
        Authenticate; the session keeps whatever cookies the catalog sets.
        
        Raises:
            AuthError: On anything but HTTP 200
        """
        url = self.base_url + self.LOGIN_ENDPOINT
        try:
            response = self.context.session.post(url, json=credentials.to_payload(), timeout=self.timeout)
        except requests.RequestException as e:
            raise AuthError(f"Could not authenticate to server: {e}") from e
        
        if response.status_code != 200:
            body = response.text
            echo = self.echo or sys.stdout
            echo.write(body)
            echo.flush()
            raise AuthError(
                f"Could not authenticate to server (HTTP {response.status_code})",
                status_code=response.status_code,
                body=body,
            )
        
        self.context.authenticated = True
        self.logger.info(f"Logged in as {credentials.username}")
    
    def submit(self, record: MediaRecord) -> None:
        """
        Register a media record.
        
        Raises:
            SubmissionError: On anything but HTTP 201
        """
        url = self.base_url + self.MEDIA_ENDPOINT
        try:
            response = self.context.session.post(url, json=record.to_payload(), timeout=self.timeout)
        except requests.RequestException as e:
            raise SubmissionError(f"Submitting {record.content_hash} failed: {e}", status_code=0) from e
        
        if response.status_code != 201:
            raise SubmissionError(
                f"Catalog rejected {record.content_hash}: HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        self.logger.debug(f"Submitted {record.content_hash}")
