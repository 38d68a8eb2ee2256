from .prelude import log, imwrite, par_for, ContactSheetError, ConfigError, ProbeError, CaptureError, EncodeError
from .color import parse_hex_color
from .sampling import sample_timestamps
from .imgproc import scale_to_fit, infer_cell_height
from .montage import GridSpec, compose_grid
from .video import Video, VideoMetadata, MediaProbe, FrameExtractor, FFprobeProbe, FFmpegExtractor
from .config import SheetConfig
from .sheet import make_contact_sheet, generate
