import os
import shutil
import tempfile
import logging
import datetime
import importlib
from concurrent.futures import ThreadPoolExecutor, ProcessPoolExecutor
from tqdm import tqdm
import multiprocessing as mp


def try_import(to_import, current_module):
    try:
        return importlib.import_module(to_import)
    except ImportError:
        raise Exception(
            'Module {} requires package `{}`, but you don\'t have it installed. Install it to use this module.'.
            format(current_module, to_import)) from None
    # Note: "raise from None" pattern means "don't show the old exception, just the new one"


log = logging.getLogger('contactsheet')
log.setLevel(logging.INFO)
log.propagate = False
if not log.handlers:

    class CustomFormatter(logging.Formatter):
        def format(self, record):
            level = record.levelname[0]
            time = datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')[2:]
            if len(record.args) > 0:
                record.msg = '({})'.format(', '.join(
                    [str(x) for x in [record.msg] + list(record.args)]))
                record.args = ()
            return '{level} {time} {filename}:{lineno:03d}] {msg}'.format(
                level=level, time=time, **record.__dict__)

    handler = logging.StreamHandler()
    handler.setFormatter(CustomFormatter())
    log.addHandler(handler)


class ContactSheetError(Exception):
    pass


class ConfigError(ContactSheetError):
    """Invalid option, color or output format. Raised before any work begins."""
    pass


class ProbeError(ContactSheetError):
    """Video metadata could not be read."""
    pass


class CaptureError(ContactSheetError):
    """
    A frame could not be extracted.

    Attributes:
        index (int): 0-based position of the failing frame in the grid, if known.
        timestamp (float): Requested time in seconds.
    """

    def __init__(self, message, index=None, timestamp=None):
        super().__init__(message)
        self.index = index
        self.timestamp = timestamp


class EncodeError(ContactSheetError):
    """Output image could not be encoded or written."""
    pass


def check_positive(instance, attribute, value):
    if value <= 0:
        raise ConfigError('{} must be a positive integer, got {}'.format(attribute.name, value))


def check_non_negative(instance, attribute, value):
    if value < 0:
        raise ConfigError('{} cannot be negative, got {}'.format(attribute.name, value))


REQUIRED_EXECUTABLES =['ffmpeg', 'ffprobe']

IMAGE_FORMATS = {'': 'png', '.png': 'png', '.jpg': 'jpeg', '.jpeg': 'jpeg'}


def ensure_executables(names=REQUIRED_EXECUTABLES):
    for name in names:
        if shutil.which(name) is None:
            raise ConfigError('Could not find `{}`. Install it and make sure it is in your PATH.'.format(name))


def ffmpeg_fmt_time(t):
    return '{:.3f}'.format(t)


def image_format(path):
    ext = os.path.splitext(path)[1].lower()
    if ext not in IMAGE_FORMATS:
        raise ConfigError('Unsupported output format `{}`, expected .png, .jpg or .jpeg'.format(ext))
    return IMAGE_FORMATS[ext]


def imwrite(path, img, quality=90):
    """
    Encode an RGB(A) image and write it to disk.

    The format is picked from the file extension. The whole image is encoded in memory
    before the file is opened, so a failed encode leaves nothing behind.

    Args:
        path (str): Output path, .png (or no extension), .jpg or .jpeg.
        img (np.array): (h x w x 3|4) np.uint8 image in RGB(A) order.
        quality (int, optional): JPEG quality, 1-100.
    """
    cv2 = try_import('cv2', 'contactsheet')

    fmt = image_format(path)
    if not 1 <= quality <= 100:
        raise ConfigError('quality must be in 1-100, got {}'.format(quality))

    channels = img.shape[2] if img.ndim == 3 else 1
    if fmt == 'jpeg':
        # JPEG has no alpha channel
        if channels == 4:
            img = cv2.cvtColor(img, cv2.COLOR_RGBA2BGR)
        elif channels == 3:
            img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)
        ok, buf = cv2.imencode('.jpg', img, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])
    else:
        if channels == 4:
            img = cv2.cvtColor(img, cv2.COLOR_RGBA2BGRA)
        elif channels == 3:
            img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)
        ok, buf = cv2.imencode('.png', img)

    if not ok:
        raise EncodeError('Failed to encode {} image for {}'.format(fmt, path))

    tmp_path = None
    try:
        out_dir = os.path.dirname(path)
        if out_dir != '':
            os.makedirs(out_dir, exist_ok=True)
        # Only a complete file ever appears at `path`
        with tempfile.NamedTemporaryFile(
                dir=out_dir or '.', prefix='.' + os.path.basename(path), suffix='.tmp',
                delete=False) as f:
            tmp_path = f.name
            f.write(buf.tobytes())
        # Temp files are created 0600; give the output the usual umask-based mode
        umask = os.umask(0)
        os.umask(umask)
        os.chmod(tmp_path, 0o666 & ~umask)
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise EncodeError('Failed to write {}: {}'.format(path, e)) from e


def par_for(f, l, process=False, workers=None, progress=True):
    Pool = ProcessPoolExecutor if process else ThreadPoolExecutor
    with Pool(max_workers=mp.cpu_count() if workers is None else workers) as executor:
        if progress:
            return list(tqdm(executor.map(f, l), total=len(l)))
        else:
            return list(executor.map(f, l))
