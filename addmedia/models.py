"""
Data types shared by the ingestion components.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional


class MediaType(str, Enum):
    """Coarse media type as understood by the catalog."""
    IMAGE = 'image'
    VIDEO = 'video'
    AUDIO = 'audio'
    UNKNOWN = ''


@dataclass(frozen=True)
class ProbeResult:
    """
    Container/stream metadata of a source file.
    
    Attributes:
        width: Native width in pixels (0 for audio without cover art)
        height: Native height in pixels
        has_video: True if the source carries a moving picture stream
        has_audio: True if the source carries an audio stream
        extension: Container extension, e.g. 'jpg', 'mp4'
        title: Embedded title, if any
        decoder: Which backend can decode a frame ('pillow' or 'ffmpeg')
    """
    width: int
    height: int
    has_video: bool = False
    has_audio: bool = False
    extension: str = ''
    title: Optional[str] = None
    decoder: str = 'pillow'


@dataclass(frozen=True)
class Classification:
    """Result of a classifier: the type tag and format string."""
    type: MediaType
    format: str


@dataclass(frozen=True)
class Credentials:
    """Catalog login; the password never shows up in repr()."""
    username: str
    password: str = field(repr=False)
    
    def to_payload(self) -> dict:
        return {'Username': self.username, 'Password': self.password}


@dataclass(frozen=True)
class MediaRecord:
    """
    Metadata record for one ingested file.
    
    Attributes:
        content_hash: Content identifier of the original
        title: Title to show in the catalog
        creator: Creator name (left to the catalog when empty)
        tags: Tag ids
        timestamp: Unix timestamp of the source file
        source_url: Gateway URL of the original
        thumbnail_url: Gateway URL of the thumbnail
        type: Coarse media type
        format: Format string, e.g. 'jpg'
    """
    content_hash: str
    title: str
    creator: str
    tags: FrozenSet[int]
    timestamp: int
    source_url: str
    thumbnail_url: str
    type: MediaType
    format: str
    
    @classmethod
    def build(
        cls,
        content_hash: str,
        thumbnail_hash: str,
        gateway: str,
        classification: Classification,
        probe: Optional[ProbeResult] = None,
        timestamp: int = 0,
        creator: str = '',
        tags: Iterable[int] = (),
    ) -> 'MediaRecord':
        """
        Assemble a record from the results of the upload and classify steps.
        
        Raises:
            ValueError: If either content identifier is empty
        """
        if not content_hash or not thumbnail_hash:
            raise ValueError("A media record needs both content identifiers")
        
        title = probe.title if probe and probe.title else ''
        return cls(
            content_hash=content_hash,
            title=title,
            creator=creator,
            tags=frozenset(tags),
            timestamp=int(timestamp),
            source_url=gateway + content_hash,
            thumbnail_url=gateway + thumbnail_hash,
            type=classification.type,
            format=classification.format,
        )
    
    def to_payload(self) -> dict:
        """Serialize to the catalog's JSON field names."""
        return {
            'Sha1': self.content_hash,
            'Title': self.title,
            'Creator': self.creator,
            'Tags': sorted(self.tags),
            'Timestamp': self.timestamp,
            'URL': self.source_url,
            'URLThumb': self.thumbnail_url,
            'Type': self.type.value,
            'Format': self.format,
        }
