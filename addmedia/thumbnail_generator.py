"""
ThumbnailGenerator - Square JPEG thumbnails from images and videos.
"""

import io
import logging
from typing import Optional, Tuple

from PIL import Image

from .errors import ThumbnailError
from .models import ProbeResult
from .probe import MediaProber


THUMB_SIZE = 128

# Added to the shorter side of the resize box so the fit is decided by the
# longer side's rounding and the shorter side ends up exactly THUMB_SIZE.
THUMB_PADDING = 2

JPEG_QUALITY = 80


def calc_target_dims(
    width: int,
    height: int,
    size: int = THUMB_SIZE,
    padding: int = THUMB_PADDING
) -> Tuple[int, int]:
    """
    Resize box that scales the shorter side of (width, height) to size.
    
    Square sources are returned unchanged. Otherwise the longer side is
    scaled by size / shorter side and the shorter side gets size + padding.
    
    Args:
        width: Source width in pixels
        height: Source height in pixels
        size: Target length of the shorter side
        padding: Extra pixels on the shorter side of the box
        
    Returns:
        Tuple of (width, height)
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid dimensions: {width}x{height}")
    
    if width == height:
        return width, height
    if width > height:
        return round(width * (size / height)), size + padding
    return size + padding, round(height * (size / width))


def fit_within(width: int, height: int, box: Tuple[int, int]) -> Tuple[int, int]:
    """Scale (width, height) to fit inside box, keeping the aspect ratio."""
    scale = min(box[0] / width, box[1] / height)
    return max(1, round(width * scale)), max(1, round(height * scale))


def crop_center_square(img: Image.Image) -> Image.Image:
    """Crop the largest centered square out of img."""
    width, height = img.size
    side = min(width, height)
    left = (width - side) // 2
    top = (height - side) // 2
    return img.crop((left, top, left + side, top + side))


class ThumbnailGenerator:
    """
    Generates square thumbnails using Pillow.
    
    The source is resized so its shorter side becomes `size`, cropped to a
    centered square and encoded as JPEG. Square sources keep their native
    dimensions.
    """
    
    def __init__(
        self,
        size: int = THUMB_SIZE,
        quality: int = JPEG_QUALITY,
        padding: int = THUMB_PADDING,
        prober: Optional[MediaProber] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail generator.
        
        Args:
            size: Side of the square thumbnail (default: 128)
            quality: JPEG quality for output (default: 80)
            padding: Extra pixels on the shorter side of the resize box
            prober: MediaProber used to read and decode sources
            logger: Optional logger instance
        """
        self.size = size
        self.quality = quality
        self.padding = padding
        self.logger = logger or logging.getLogger(__name__)
        self.prober = prober or MediaProber(logger=self.logger)
    
    def generate(self, path: str) -> Tuple[bytes, ProbeResult]:
        """
        Generate a thumbnail for a file.
        
        Args:
            path: Path to an image, video or audio file
            
        Returns:
            Tuple of (jpeg_bytes, probe_result)
            
        Raises:
            UnsupportedFormatError: If the file is not decodable media
            ThumbnailError: If decoding, resizing or encoding failed
        """
        probe = self.prober.probe(path)
        frame = self.prober.open_frame(path, probe)
        try:
            return self.render(frame), probe
        except Exception as e:
            self.logger.error(f"Error generating thumbnail for {path}: {e}")
            raise ThumbnailError(f"Could not create thumbnail for {path}: {e}") from e
    
    def render(self, img: Image.Image) -> bytes:
        """Resize, crop and encode an already decoded frame."""
        img = self._convert_color_mode(img)
        
        box = calc_target_dims(img.width, img.height, self.size, self.padding)
        target = fit_within(img.width, img.height, box)
        if target != img.size:
            img = img.resize(target, Image.Resampling.LANCZOS)
        
        img = crop_center_square(img)
        
        output = io.BytesIO()
        img.save(output, format='JPEG', quality=self.quality)
        return output.getvalue()
    
    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Flatten to RGB, compositing transparency onto white."""
        if img.mode in ('RGBA', 'LA'):
            background = Image.new('RGB', img.size, (255, 255, 255))
            if img.mode == 'LA':
                img = img.convert('RGBA')
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode == 'P':
            img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode != 'RGB':
            return img.convert('RGB')
        return img
