from .prelude import try_import
import math

DEFAULT_ASPECT = (16, 9)


def round_half_up(x):
    return int(math.floor(x + 0.5))


def scale_to_fit(img, max_width, max_height):
    """
    Resize an image by a single factor so it fits inside a (max_width x max_height) box.

    Never crops and never changes the aspect ratio. Each side is rounded to the nearest
    pixel and kept at least 1 pixel long.

    Args:
        img (np.array): (h x w x c) np.uint8 image.
        max_width (int): Box width in pixels.
        max_height (int): Box height in pixels.

    Returns:
        np.array: Resized (h' x w' x c) np.uint8 image.
    """
    cv2 = try_import('cv2', 'contactsheet')

    (height, width) = img.shape[:2]
    if width == 0 or height == 0:
        raise ValueError('Cannot scale an empty {}x{} image'.format(width, height))

    scale = min(max_width / width, max_height / height)
    if scale <= 0 or math.isinf(scale) or math.isnan(scale):
        scale = 1

    new_width = max(round_half_up(width * scale), 1)
    new_height = max(round_half_up(height * scale), 1)

    if (new_width, new_height) == (width, height):
        return img.copy()

    # Area averaging when shrinking, bilinear when growing
    interpolation = cv2.INTER_AREA if scale < 1 else cv2.INTER_LINEAR
    resized = cv2.resize(img, (new_width, new_height), interpolation=interpolation)
    if resized.ndim == 2:
        resized = resized[:, :, None]
    return resized


def infer_cell_height(cell_width, video_width, video_height):
    """
    Derive a cell height matching the video's aspect ratio, or 16:9 if it is unknown.
    """
    fallback = round_half_up(cell_width * DEFAULT_ASPECT[1] / DEFAULT_ASPECT[0])
    if video_width <= 0 or video_height <= 0:
        return fallback

    height = round_half_up(cell_width * video_height / video_width)
    if height <= 0:
        return fallback
    return height
