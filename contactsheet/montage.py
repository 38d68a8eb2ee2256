from attr import attrs, attrib, evolve
import numpy as np
from .prelude import ConfigError, check_positive, check_non_negative, log
from .color import parse_hex_color
from .imgproc import infer_cell_height

WHITE = (255, 255, 255, 255)


def _to_rgba(value):
    if isinstance(value, str):
        return parse_hex_color(value)
    value = tuple(int(c) for c in value)
    if len(value) == 3:
        value = value + (255, )
    if len(value) != 4 or any(c < 0 or c > 255 for c in value):
        raise ConfigError('Background must be an RGB(A) tuple of 0-255 values, got {}'.format(value))
    return value


@attrs(frozen=True)
class GridSpec:
    """
    Geometry of a contact sheet.

    A cell_height of 0 means "infer from the video", see `resolve`.
    """
    rows = attrib(type=int, default=3, validator=check_positive)
    cols = attrib(type=int, default=3, validator=check_positive)
    cell_width = attrib(type=int, default=320, validator=check_positive)
    cell_height = attrib(type=int, default=0, validator=check_non_negative)
    margin = attrib(type=int, default=8, validator=check_non_negative)
    background = attrib(default=WHITE, converter=_to_rgba)

    def num_cells(self):
        return self.rows * self.cols

    def resolve(self, metadata):
        """
        Fill in the cell height from the video's aspect ratio if it was left at 0.

        Args:
            metadata (VideoMetadata): Probed video metadata.

        Returns:
            GridSpec: Spec with a positive cell_height.
        """
        if self.cell_height != 0:
            return self
        height = infer_cell_height(self.cell_width, metadata.width, metadata.height)
        log.debug('Inferred cell height {} from {}x{}'.format(height, metadata.width,
                                                               metadata.height))
        return evolve(self, cell_height=height)

    def canvas_size(self):
        """
        Returns:
            Tuple[int, int]: (width, height) of the full sheet in pixels.
        """
        width = self.cols * self.cell_width + (self.cols + 1) * self.margin
        height = self.rows * self.cell_height + (self.rows + 1) * self.margin
        return (width, height)

    def cell_origin(self, index):
        """
        Returns:
            Tuple[int, int]: (x, y) of the top-left corner of cell `index`, row-major.
        """
        row = index // self.cols
        col = index % self.cols
        x = self.margin + col * (self.cell_width + self.margin)
        y = self.margin + row * (self.cell_height + self.margin)
        return (x, y)

    def frame_offset(self, index, frame_width, frame_height):
        """
        Returns:
            Tuple[int, int]: (x, y) placing a frame centered in cell `index`. An odd
            leftover pixel puts the frame one pixel closer to the top-left.
        """
        (x, y) = self.cell_origin(index)
        return (x + (self.cell_width - frame_width) // 2, y + (self.cell_height - frame_height) // 2)


def new_canvas(spec):
    (width, height) = spec.canvas_size()
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = spec.background
    return canvas


def _as_rgba(img):
    if img.ndim == 2:
        img = img[:, :, None]
    channels = img.shape[2]
    if channels == 1:
        img = np.repeat(img, 3, axis=2)
    if channels in (1, 3):
        alpha = np.full(img.shape[:2] + (1, ), 255, dtype=np.uint8)
        img = np.concatenate([img, alpha], axis=2)
    return img


def paste_over(canvas, img, x, y):
    """
    Alpha-composite `img` onto `canvas` in place with its top-left corner at (x, y).

    Both images use straight (non-premultiplied) alpha. Whatever falls outside the
    canvas is clipped.
    """
    (h, w) = img.shape[:2]
    (ch, cw) = canvas.shape[:2]
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + w, cw), min(y + h, ch)
    if x0 >= x1 or y0 >= y1:
        return

    src = _as_rgba(img)[y0 - y:y1 - y, x0 - x:x1 - x]
    dst = canvas[y0:y1, x0:x1]

    if np.all(src[:, :, 3] == 255):
        dst[:] = src
        return

    src_a = src[:, :, 3:].astype(np.float32) / 255
    dst_a = dst[:, :, 3:].astype(np.float32) / 255
    out_a = src_a + dst_a * (1 - src_a)
    out_rgb = src[:, :, :3] * src_a + dst[:, :, :3] * dst_a * (1 - src_a)
    out_rgb = out_rgb / np.where(out_a == 0, 1, out_a)

    dst[:, :, :3] = np.clip(np.round(out_rgb), 0, 255).astype(np.uint8)
    dst[:, :, 3:] = np.clip(np.round(out_a * 255), 0, 255).astype(np.uint8)


def compose_grid(frames, spec):
    """
    Lay fitted frames out on a sheet, row-major, each centered in its cell.

    Args:
        frames (List[np.array]): One image per cell, in display order. `None` entries
            leave their cell empty.
        spec (GridSpec): Grid geometry with a resolved cell height.

    Returns:
        np.array: (H x W x 4) np.uint8 RGBA canvas.
    """
    canvas = new_canvas(spec)
    for (i, frame) in enumerate(frames):
        if frame is None:
            continue
        (h, w) = frame.shape[:2]
        (x, y) = spec.frame_offset(i, w, h)
        paste_over(canvas, frame, x, y)
    return canvas
