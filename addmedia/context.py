"""
IngestContext - Per-run state shared by the clients.
"""

from dataclasses import dataclass, field

import requests

from .config import IngestConfig


@dataclass
class IngestContext:
    """
    Config plus the HTTP session for one run.
    
    Built once before any pipeline work and handed to every client. The
    session picks up the catalog's auth cookies on login.
    """
    config: IngestConfig
    session: requests.Session = field(default_factory=requests.Session)
    authenticated: bool = False
    
    def close(self) -> None:
        self.session.close()
