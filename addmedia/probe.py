"""
MediaProber - Reads dimensions, stream types and title from a media file.

Still images go through Pillow, which only parses headers on open. Everything
else is handed to ffprobe, and ffmpeg is used to pull a single representative
frame when a thumbnail is needed.
"""

import json
import logging
import os
import tempfile
from typing import Optional

import sh
from PIL import Image, UnidentifiedImageError

from .errors import ThumbnailError, UnsupportedFormatError
from .models import ProbeResult


EXIF_IMAGE_DESCRIPTION = 0x010E


class MediaProber:
    """
    Probes files and decodes the frame a thumbnail is made from.
    """

    # Pillow formats treated as still images, mapped to their extension
    PILLOW_FORMATS = {
        'JPEG': 'jpg',
        'MPO': 'jpg',
        'PNG': 'png',
        'GIF': 'gif',
        'BMP': 'bmp',
        'TIFF': 'tiff',
        'WEBP': 'webp',
        'ICO': 'ico',
        'PPM': 'ppm',
        'TGA': 'tga',
    }

    CONTAINER_EXTENSIONS = {
        'mpeg': 'mpg',
        'mpegts': 'ts',
        'matroska': 'mkv',
        'ogg': 'ogg',
        'avi': 'avi',
        'flv': 'flv',
        'mp3': 'mp3',
        'wav': 'wav',
        'flac': 'flac',
        'aac': 'aac',
    }

    WEBM_CODECS = {'vp8', 'vp9', 'av1', 'vorbis', 'opus'}

    def __init__(
        self,
        ffprobe: str = 'ffprobe',
        ffmpeg: str = 'ffmpeg',
        timeout: float = 60.0,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize prober.

        Args:
            ffprobe: ffprobe executable name or path
            ffmpeg: ffmpeg executable name or path
            timeout: Seconds to wait for either tool
            logger: Optional logger instance
        """
        self.ffprobe = ffprobe
        self.ffmpeg = ffmpeg
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    def probe(self, path: str) -> ProbeResult:
        """
        Probe a file without decoding it fully.

        Raises:
            UnsupportedFormatError: If the file isn't a decodable media stream
            ThumbnailError: If probing failed for another reason
        """
        result = self._probe_still(path)
        if result is not None:
            return result
        return self._probe_ffprobe(path)

    def open_frame(self, path: str, probe: ProbeResult) -> Image.Image:
        """
        Decode the frame the thumbnail is derived from.

        Stills decode their first frame; anything else gets a single
        representative frame from ffmpeg.
        """
        if probe.decoder == 'pillow':
            try:
                with Image.open(path) as img:
                    img.load()
                    return img.copy()
            except (OSError, ValueError, Image.DecompressionBombError) as e:
                raise ThumbnailError(f"Could not decode {path}: {e}") from e

        if not probe.width or not probe.height:
            raise ThumbnailError(f"No picture to make a thumbnail from: {path}")
        return self._extract_frame(path)

    def _probe_still(self, path: str) -> Optional[ProbeResult]:
        try:
            with Image.open(path) as img:
                if img.format not in self.PILLOW_FORMATS:
                    self.logger.debug(f"Pillow format {img.format} not a still, using ffprobe: {path}")
                    return None
                width, height = img.size
                return ProbeResult(
                    width=width,
                    height=height,
                    extension=self.PILLOW_FORMATS[img.format],
                    title=self._still_title(img),
                    decoder='pillow',
                )
        except UnidentifiedImageError:
            return None
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            raise ThumbnailError(f"Could not read image header of {path}: {e}") from e

    @staticmethod
    def _still_title(img: Image.Image) -> Optional[str]:
        title = img.info.get('Title') or img.info.get('title')
        if not title:
            try:
                title = img.getexif().get(EXIF_IMAGE_DESCRIPTION)
            except (AttributeError, OSError, ValueError):
                title = None
        if isinstance(title, bytes):
            title = title.decode('utf-8', errors='replace')
        if isinstance(title, str):
            title = title.strip('\x00 ')
        return title or None

    def _probe_ffprobe(self, path: str) -> ProbeResult:
        output = self._run_ffprobe(path)
        try:
            data = json.loads(output or '{}')
        except ValueError as e:
            raise ThumbnailError(f"Unreadable ffprobe output for {path}: {e}") from e
        return self.parse_ffprobe(data, path)

    def parse_ffprobe(self, data: dict, path: str) -> ProbeResult:
        """Build a ProbeResult from ffprobe's JSON output."""
        fmt = data.get('format') or {}
        format_name = fmt.get('format_name', '')
        streams = data.get('streams') or []

        video = [s for s in streams if s.get('codec_type') == 'video']
        audio = [s for s in streams if s.get('codec_type') == 'audio']
        if (not video and not audio) or format_name == 'tty':
            raise UnsupportedFormatError(f"No media streams in {path}")

        moving = [s for s in video if not (s.get('disposition') or {}).get('attached_pic')]
        still = format_name == 'image2' or format_name.endswith('_pipe')

        width = height = 0
        if video:
            width = int(video[0].get('width') or 0)
            height = int(video[0].get('height') or 0)

        tags = {str(k).lower(): v for k, v in (fmt.get('tags') or {}).items()}

        return ProbeResult(
            width=width,
            height=height,
            has_video=bool(moving) and not still,
            has_audio=bool(audio),
            extension=self._container_extension(format_name, streams, tags, path),
            title=tags.get('title') or None,
            decoder='ffmpeg',
        )

    def _container_extension(self, format_name: str, streams: list, tags: dict, path: str) -> str:
        codecs = {s.get('codec_name') for s in streams if s.get('codec_name')}
        has_video = any(s.get('codec_type') == 'video' for s in streams)

        if format_name.startswith('mov,mp4'):
            if tags.get('major_brand', '').strip() == 'qt':
                return 'mov'
            return 'mp4' if has_video else 'm4a'
        if format_name == 'matroska,webm':
            return 'webm' if codecs and codecs <= self.WEBM_CODECS else 'mkv'
        if format_name == 'asf':
            return 'wmv' if has_video else 'wma'
        if format_name == 'image2' or format_name.endswith('_pipe'):
            ext = os.path.splitext(path)[1].lstrip('.').lower()
            return ext or format_name.replace('_pipe', '')

        first = format_name.split(',')[0]
        return self.CONTAINER_EXTENSIONS.get(first, first)

    def _command(self, name: str):
        try:
            return sh.Command(name)
        except sh.CommandNotFound as e:
            raise ThumbnailError(f"{name} is not installed") from e

    def _run_ffprobe(self, path: str) -> str:
        ffprobe = self._command(self.ffprobe)
        try:
            return str(ffprobe(
                '-v', 'quiet',
                '-print_format', 'json',
                '-show_format',
                '-show_streams',
                path,
                _timeout=self.timeout,
            ))
        except sh.ErrorReturnCode as e:
            raise UnsupportedFormatError(f"Not a media file: {path}") from e
        except sh.TimeoutException as e:
            raise ThumbnailError(f"ffprobe timed out on {path}") from e

    def _run_ffmpeg(self, path: str, output: str) -> None:
        ffmpeg = self._command(self.ffmpeg)
        try:
            ffmpeg(
                '-v', 'error',
                '-i', path,
                '-map', '0:v:0',
                '-vf', 'thumbnail',
                '-frames:v', '1',
                '-y', output,
                _timeout=self.timeout,
            )
        except sh.ErrorReturnCode as e:
            stderr = e.stderr.decode('utf-8', errors='replace').strip()
            raise ThumbnailError(f"ffmpeg could not decode a frame of {path}: {stderr}") from e
        except sh.TimeoutException as e:
            raise ThumbnailError(f"ffmpeg timed out on {path}") from e

    def _extract_frame(self, path: str) -> Image.Image:
        with tempfile.TemporaryDirectory(prefix='addmedia_') as tmpdir:
            output = os.path.join(tmpdir, 'frame.png')
            self._run_ffmpeg(path, output)
            if not os.path.exists(output):
                raise ThumbnailError(f"ffmpeg produced no frame for {path}")
            try:
                with Image.open(output) as img:
                    img.load()
                    return img.copy()
            except OSError as e:
                raise ThumbnailError(f"Could not read extracted frame of {path}: {e}") from e
