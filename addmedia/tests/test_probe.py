"""Tests for MediaProber class."""

import json

import pytest
from PIL import Image, PngImagePlugin

from addmedia.errors import ThumbnailError, UnsupportedFormatError
from addmedia.probe import MediaProber


def ffprobe_output(streams, format_name, tags=None):
    return {'streams': streams, 'format': {'format_name': format_name, 'tags': tags or {}}}


VIDEO_STREAM = {'codec_type': 'video', 'codec_name': 'h264', 'width': 1280, 'height': 720}
AUDIO_STREAM = {'codec_type': 'audio', 'codec_name': 'aac'}


class TestStillProbe:
    """Tests for probing still images with Pillow."""
    
    def test_jpeg(self, make_image_file):
        """Test JPEG dimensions and extension."""
        path = make_image_file(size=(200, 100))
        
        result = MediaProber().probe(path)
        
        assert (result.width, result.height) == (200, 100)
        assert result.extension == 'jpg'
        assert result.decoder == 'pillow'
        assert result.has_video is False
        assert result.title is None
    
    def test_png_title(self, tmp_path):
        """Test the PNG Title text chunk becomes the title."""
        info = PngImagePlugin.PngInfo()
        info.add_text('Title', 'Sunset')
        path = tmp_path / 'sunset.png'
        Image.new('RGB', (20, 10)).save(path, format='PNG', pnginfo=info)
        
        result = MediaProber().probe(str(path))
        
        assert result.extension == 'png'
        assert result.title == 'Sunset'
    
    def test_non_image_goes_to_ffprobe(self, tmp_path, mocker):
        """Test files Pillow can't identify are probed with ffprobe."""
        path = tmp_path / 'clip.mp4'
        path.write_bytes(b'\x00\x00\x00\x18ftypmp42')
        prober = MediaProber()
        run = mocker.patch.object(
            prober, '_run_ffprobe',
            return_value=json.dumps(ffprobe_output([VIDEO_STREAM, AUDIO_STREAM], 'mov,mp4,m4a,3gp,3g2,mj2')),
        )
        
        result = prober.probe(str(path))
        
        run.assert_called_once_with(str(path))
        assert result.has_video is True
        assert result.has_audio is True
        assert result.extension == 'mp4'
        assert result.decoder == 'ffmpeg'
    
    def test_missing_file(self, tmp_path):
        """Test unreadable files raise ThumbnailError."""
        with pytest.raises(ThumbnailError):
            MediaProber().probe(str(tmp_path / 'missing.jpg'))


class TestParseFfprobe:
    """Tests for interpreting ffprobe output."""
    
    def test_video_dims_and_title(self):
        data = ffprobe_output([VIDEO_STREAM, AUDIO_STREAM], 'matroska,webm', {'TITLE': 'Holiday'})
        
        result = MediaProber().parse_ffprobe(data, 'clip.mkv')
        
        assert (result.width, result.height) == (1280, 720)
        assert result.extension == 'mkv'
        assert result.title == 'Holiday'
    
    def test_webm(self):
        streams = [
            {'codec_type': 'video', 'codec_name': 'vp9', 'width': 640, 'height': 360},
            {'codec_type': 'audio', 'codec_name': 'opus'},
        ]
        
        result = MediaProber().parse_ffprobe(ffprobe_output(streams, 'matroska,webm'), 'clip')
        
        assert result.extension == 'webm'
    
    def test_quicktime(self):
        data = ffprobe_output([VIDEO_STREAM], 'mov,mp4,m4a,3gp,3g2,mj2', {'major_brand': 'qt  '})
        
        assert MediaProber().parse_ffprobe(data, 'a.mov').extension == 'mov'
    
    def test_audio_with_cover_art(self):
        """Test an attached picture is not a video stream."""
        cover = {'codec_type': 'video', 'codec_name': 'mjpeg', 'width': 500, 'height': 500,
                 'disposition': {'attached_pic': 1}}
        data = ffprobe_output([{'codec_type': 'audio', 'codec_name': 'mp3'}, cover], 'mp3')
        
        result = MediaProber().parse_ffprobe(data, 'song.mp3')
        
        assert result.has_video is False
        assert result.has_audio is True
        assert (result.width, result.height) == (500, 500)
        assert result.extension == 'mp3'
    
    def test_image_pipe_is_still(self):
        streams = [{'codec_type': 'video', 'codec_name': 'hevc', 'width': 40, 'height': 30}]
        
        result = MediaProber().parse_ffprobe(ffprobe_output(streams, 'hevc_pipe'), 'pic.heic')
        
        assert result.has_video is False
        assert result.extension == 'heic'
    
    def test_mpeg_extension(self):
        data = ffprobe_output([VIDEO_STREAM], 'mpeg')
        
        assert MediaProber().parse_ffprobe(data, 'a.mpg').extension == 'mpg'
    
    def test_no_streams(self):
        with pytest.raises(UnsupportedFormatError):
            MediaProber().parse_ffprobe(ffprobe_output([], 'data'), 'blob.bin')
    
    def test_text_file(self):
        streams = [{'codec_type': 'video', 'codec_name': 'ansi', 'width': 640, 'height': 400}]
        
        with pytest.raises(UnsupportedFormatError):
            MediaProber().parse_ffprobe(ffprobe_output(streams, 'tty'), 'notes.txt')


class TestOpenFrame:
    """Tests for decoding the thumbnail frame."""
    
    def test_still(self, make_image_file):
        path = make_image_file(size=(30, 20))
        prober = MediaProber()
        
        img = prober.open_frame(path, prober.probe(path))
        
        assert img.size == (30, 20)
    
    def test_audio_without_picture(self):
        from addmedia.models import ProbeResult
        probe = ProbeResult(0, 0, has_audio=True, extension='mp3', decoder='ffmpeg')
        
        with pytest.raises(ThumbnailError):
            MediaProber().open_frame('song.mp3', probe)
    
    def test_video_uses_ffmpeg(self, mocker):
        from addmedia.models import ProbeResult
        probe = ProbeResult(64, 48, has_video=True, extension='mp4', decoder='ffmpeg')
        
        def fake_ffmpeg(path, output):
            Image.new('RGB', (64, 48), color='green').save(output, format='PNG')
        
        prober = MediaProber()
        mocker.patch.object(prober, '_run_ffmpeg', side_effect=fake_ffmpeg)
        
        img = prober.open_frame('clip.mp4', probe)
        
        assert img.size == (64, 48)
    
    def test_ffmpeg_no_output(self, mocker):
        from addmedia.models import ProbeResult
        probe = ProbeResult(64, 48, has_video=True, extension='mp4', decoder='ffmpeg')
        prober = MediaProber()
        mocker.patch.object(prober, '_run_ffmpeg', return_value=None)
        
        with pytest.raises(ThumbnailError):
            prober.open_frame('clip.mp4', probe)
