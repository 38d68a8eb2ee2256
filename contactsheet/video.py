from attr import attrs, attrib
from abc import ABC, abstractmethod
import subprocess as sp
import numpy as np
import json
from .prelude import *


@attrs(frozen=True)
class VideoMetadata:
    duration = attrib(type=float)
    width = attrib(type=int)
    height = attrib(type=int)


class MediaProbe(ABC):
    @abstractmethod
    def probe(self, path):
        """
        Args:
            path (str): Path to a video file.

        Returns:
            VideoMetadata: Duration and resolution of the video.
        """
        pass


class FrameExtractor(ABC):
    @abstractmethod
    def extract_frame(self, path, timestamp):
        """
        Args:
            path (str): Path to a video file.
            timestamp (float): Time in seconds.

        Returns:
            np.array: (h x w x 3) np.uint8 RGB image.
        """
        pass


class FFprobeProbe(MediaProbe):
    def __init__(self, executable='ffprobe'):
        self._executable = executable

    def _run(self, path):
        cmd = [
            self._executable, '-v', 'error', '-print_format', 'json', '-show_format',
            '-show_streams', path
        ]
        try:
            result = sp.run(cmd, stdout=sp.PIPE, stderr=sp.PIPE, check=True)
        except OSError as e:
            raise ProbeError('Failed to run {}: {}'.format(self._executable, e)) from e
        except sp.CalledProcessError as e:
            raise ProbeError('Failed to probe `{}`: {}'.format(
                path, e.stderr.decode('utf-8', errors='replace').strip())) from None

        try:
            return json.loads(result.stdout.decode('utf-8'))
        except ValueError as e:
            raise ProbeError('Failed to parse ffprobe output for `{}`: {}'.format(path, e)) from e

    def probe(self, path):
        info = self._run(path)

        stream = next(
            (s for s in info.get('streams', []) if s.get('codec_type') == 'video'), None)
        if stream is None:
            raise ProbeError('No video stream found in `{}`'.format(path))

        duration = info.get('format', {}).get('duration', stream.get('duration'))
        try:
            duration = float(duration)
            width = int(stream.get('width', 0))
            height = int(stream.get('height', 0))
        except (TypeError, ValueError):
            raise ProbeError('Failed to read duration or resolution of `{}`'.format(path)) from None

        if not duration > 0:
            raise ProbeError('Video `{}` has no duration or a duration of 0'.format(path))

        return VideoMetadata(duration=duration, width=width, height=height)


class FFmpegExtractor(FrameExtractor):
    def __init__(self, executable='ffmpeg'):
        self._executable = executable

    def extract_frame(self, path, timestamp):
        cv2 = try_import('cv2', 'contactsheet')

        cmd = [
            self._executable, '-loglevel', 'error', '-ss',
            ffmpeg_fmt_time(timestamp), '-i', path, '-frames:v', '1', '-f', 'image2pipe',
            '-vcodec', 'png', '-'
        ]
        try:
            result = sp.run(cmd, stdout=sp.PIPE, stderr=sp.PIPE, check=True)
        except OSError as e:
            raise CaptureError('Failed to run {}: {}'.format(self._executable, e),
                               timestamp=timestamp) from e
        except sp.CalledProcessError as e:
            raise CaptureError(
                'ffmpeg failed at {}s: {}'.format(
                    ffmpeg_fmt_time(timestamp),
                    e.stderr.decode('utf-8', errors='replace').strip()),
                timestamp=timestamp) from None

        if len(result.stdout) == 0:
            raise CaptureError(
                'ffmpeg returned no frame at {}s'.format(ffmpeg_fmt_time(timestamp)),
                timestamp=timestamp)

        img = cv2.imdecode(np.frombuffer(result.stdout, dtype=np.uint8), cv2.IMREAD_COLOR)
        if img is None:
            raise CaptureError(
                'Could not decode frame at {}s'.format(ffmpeg_fmt_time(timestamp)),
                timestamp=timestamp)
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)


class Video:
    """
    Reference to a video file on disk.

    Metadata and frames are read through a MediaProbe and a FrameExtractor, by default
    the ffprobe/ffmpeg binaries on PATH.
    """

    def __init__(self, path, probe=None, extractor=None):
        """
        Args:
            path (str): Path to video file
            probe (MediaProbe, optional): Metadata reader.
            extractor (FrameExtractor, optional): Frame decoder.
        """

        self._path = path
        self._probe = probe or FFprobeProbe()
        self._extractor = extractor or FFmpegExtractor()
        self._metadata = None

    def path(self):
        """
        Returns:
            str: Video file path.
        """
        return self._path

    # Lazily probe
    def metadata(self):
        """
        Returns:
            VideoMetadata: Duration and resolution, read once.
        """
        if self._metadata is None:
            self._metadata = self._probe.probe(self._path)
            log.debug('Probed {}: {:.3f}s, {}x{}'.format(self._path, self._metadata.duration,
                                                         self._metadata.width,
                                                         self._metadata.height))
        return self._metadata

    def width(self):
        """
        Returns:
            int: Width in pixels of the video.
        """
        return self.metadata().width

    def height(self):
        """
        Returns:
            int: Height in pixels of the video.
        """
        return self.metadata().height

    def duration(self):
        """
        Returns:
            float: Length of the video in seconds.
        """
        return self.metadata().duration

    def frame(self, time):
        """
        Extract a single frame from the video into memory.

        Args:
            time (float): The time in seconds of the frame to access.

        Returns:
            np.array: (h x w x 3) np.uint8 image.
        """
        return self._extractor.extract_frame(self._path, time)

    def frames(self, times, workers=1, progress=False, fn=None):
        """
        Extract multiple frames from the video into memory.

        Args:
            times (List[float]): The times in seconds of the frames to access.
            workers (int, optional): Number of frames decoded concurrently.
            progress (bool, optional): Show a progress bar.
            fn (Callable[[np.array], np.array], optional): Applied to each frame right
                after it is decoded, so only its result is kept.

        Returns:
            List[np.array]: List of images, in the order of `times`.
        """

        def capture(arg):
            (i, t) = arg
            log.debug('Capturing frame {} at {}s'.format(i + 1, ffmpeg_fmt_time(t)))
            try:
                frame = self.frame(t)
            except CaptureError as e:
                raise CaptureError(
                    'Failed to capture frame {}: {}'.format(i + 1, e), index=i,
                    timestamp=t) from e
            return fn(frame) if fn is not None else frame

        return par_for(capture, list(enumerate(times)), workers=workers, progress=progress)

    def contact_sheet(self, spec, workers=1, progress=False):
        """
        Create a contact sheet of evenly spaced frames from the video.

        Args:
            spec (GridSpec): Grid geometry.
            workers (int, optional): Number of frames decoded concurrently.
            progress (bool, optional): Show a progress bar.

        Returns:
            np.array: (H x W x 4) np.uint8 RGBA image of the sheet.
        """
        from .sheet import make_contact_sheet
        return make_contact_sheet(self, spec, workers=workers, progress=progress)
