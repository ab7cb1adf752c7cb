"""
IngestConfig - Endpoints for the content store and the catalog.
"""

import json
from dataclasses import dataclass
from typing import List

from .errors import ConfigError


DEFAULT_CONFIG_PATH = 'env.json'


@dataclass(frozen=True)
class IngestConfig:
    """
    Endpoints used for a run.
    
    Attributes:
        ipfs_gateway: URL prefix that turns a content id into a retrievable URL
        ipfs_node_api: IPFS node API address, 'host:port' or a full URL
        primboard_host: Catalog 'host[:port]'
    """
    ipfs_gateway: str
    ipfs_node_api: str
    primboard_host: str
    
    REQUIRED_KEYS = ('ipfs_gateway', 'ipfs_node_api', 'primboard_host')
    
    @classmethod
    def from_file(cls, path: str) -> 'IngestConfig':
        """
        Load the config from a JSON file.
        
        Raises:
            ConfigError: If the file can't be read or is incomplete
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except (OSError, ValueError) as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")
        
        config = cls(**{key: data.get(key) or '' for key in cls.REQUIRED_KEYS})
        errors = config.validate()
        if errors:
            raise ConfigError(f"Invalid config file {path}: " + '; '.join(errors))
        return config
    
    def validate(self) -> List[str]:
        """Return a list of problems with this config (empty if valid)."""
        errors = []
        for key in self.REQUIRED_KEYS:
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                errors.append(f"{key} is required")
        return errors
    
    @property
    def node_api_url(self) -> str:
        """IPFS node API base URL, scheme added when missing."""
        api = self.ipfs_node_api.rstrip('/')
        if '://' not in api:
            api = f"http://{api}"
        return api
    
    @property
    def catalog_url(self) -> str:
        """Catalog base URL."""
        return f"http://{self.primboard_host}"
    
    @property
    def catalog_address(self) -> tuple:
        """(host, port) of the catalog for the reachability check."""
        host = self.primboard_host.strip()
        if host.startswith('['):
            # [ipv6]:port
            addr, _, rest = host[1:].partition(']')
            port = rest[1:] if rest.startswith(':') else ''
        else:
            addr, _, port = host.partition(':')
        return addr, int(port) if port.isdigit() else 80
