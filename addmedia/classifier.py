"""
Media classifiers - Map a file to a coarse media type and format string.
"""

import os
from abc import ABC, abstractmethod
from typing import Optional

from .models import Classification, MediaType, ProbeResult


IMAGE_EXTENSIONS = frozenset({'jpeg', 'jpg', 'png'})

VIDEO_EXTENSIONS = frozenset({
    'avi', 'flv', 'm4p', 'm4v', 'mkv', 'mp4', 'mpg', 'mov', 'ogg', 'webm', 'wmv',
})

UNKNOWN = Classification(type=MediaType.UNKNOWN, format='')


class MediaClassifier(ABC):
    """Common interface so the pipeline doesn't care which policy it runs."""
    
    name = ''
    
    @abstractmethod
    def classify(self, path: str, probe: Optional[ProbeResult] = None) -> Classification:
        """Classify a file, using its probe result where the policy needs one."""


class ProbeClassifier(MediaClassifier):
    """
    Classifies from stream flags: video wins over audio, everything else
    is an image. The format is the probed container extension.
    """
    
    name = 'probe'
    
    def classify(self, path: str, probe: Optional[ProbeResult] = None) -> Classification:
        if probe is None:
            raise ValueError(f"Probe classification needs a probe result: {path}")
        
        if probe.has_video:
            media_type = MediaType.VIDEO
        elif probe.has_audio:
            media_type = MediaType.AUDIO
        else:
            media_type = MediaType.IMAGE
        return Classification(type=media_type, format=probe.extension)


class ExtensionClassifier(MediaClassifier):
    """
    Classifies from the file name alone. Extensions are compared exactly and
    case-insensitively; images are checked before videos.
    """
    
    name = 'extension'
    
    def __init__(self, image_extensions=IMAGE_EXTENSIONS, video_extensions=VIDEO_EXTENSIONS):
        self.image_extensions = frozenset(e.lower() for e in image_extensions)
        self.video_extensions = frozenset(e.lower() for e in video_extensions)
    
    def classify(self, path: str, probe: Optional[ProbeResult] = None) -> Classification:
        ext = os.path.splitext(path)[1].lstrip('.').lower()
        if not ext:
            return UNKNOWN
        if ext in self.image_extensions:
            return Classification(type=MediaType.IMAGE, format=ext)
        if ext in self.video_extensions:
            return Classification(type=MediaType.VIDEO, format=ext)
        return UNKNOWN


class AutoClassifier(MediaClassifier):
    """Uses the probe result when there is one, the file extension otherwise."""
    
    name = 'auto'
    
    def __init__(self):
        self.probe_classifier = ProbeClassifier()
        self.extension_classifier = ExtensionClassifier()
    
    def classify(self, path: str, probe: Optional[ProbeResult] = None) -> Classification:
        if probe is not None:
            return self.probe_classifier.classify(path, probe)
        return self.extension_classifier.classify(path)


CLASSIFIERS = {
    ProbeClassifier.name: ProbeClassifier,
    ExtensionClassifier.name: ExtensionClassifier,
    AutoClassifier.name: AutoClassifier,
}


def get_classifier(name: str) -> MediaClassifier:
    """
    Create a classifier by name.
    
    Raises:
        ValueError: For an unknown name
    """
    try:
        return CLASSIFIERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown classifier '{name}' (choose from {', '.join(sorted(CLASSIFIERS))})"
        ) from None
