"""Raster preprocessing: RGBA buffer -> single-channel intensity grid.

Pipeline entry for image tracing:
    1. load_raster(): decode a file with Pillow, downscale to max_side_px
    2. rgba_to_gray(): luma conversion, alpha ignored

Decoding is a convenience for scripts and tests; hosts that already hold a
decoded RGBA buffer (a canvas getImageData() dump, a camera frame) call
rgba_to_gray() directly.

Grid convention: np.ndarray shape (H, W), dtype uint8, row-major, origin
top-left with +Y down (image frame).
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


@dataclass(frozen=True)
class RasterImage:
    """Decoded RGBA image ready for tracing.

    Attributes
    ----------
    data : np.ndarray
        Pixels, shape (height, width, 4), dtype uint8
    width, height : int
        Dimensions of ``data`` (after downscaling)
    original_width, original_height : int
        Dimensions of the source file
    """

    data: np.ndarray
    width: int
    height: int
    original_width: int
    original_height: int


def rgba_to_gray(buffer, width: int, height: int) -> np.ndarray:
    """Convert an RGBA pixel buffer to an intensity grid.

    Parameters
    ----------
    buffer : bytes | bytearray | memoryview | np.ndarray
        Pixel data, 4 bytes per pixel (R, G, B, A), row-major. Arrays may be
        flat or shaped (height, width, 4).
    width, height : int
        Declared image dimensions

    Returns
    -------
    np.ndarray
        Gray values, shape (height, width), dtype uint8

    Raises
    ------
    ValueError
        If dimensions are negative, the buffer length does not equal
        width * height * 4, or a shaped array disagrees with width and height

    Notes
    -----
    gray = round(0.299 R + 0.587 G + 0.114 B), halves rounded up. Alpha is
    ignored, so transparent pixels trace as their stored color.
    """
    if width < 0 or height < 0:
        raise ValueError(f"Image dimensions must be non-negative, got {width}x{height}")

    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            raise ValueError(f"Pixel array must be uint8, got {buffer.dtype}")
        if buffer.ndim == 3 and buffer.shape != (height, width, 4):
            raise ValueError(
                f"Pixel array has shape {buffer.shape}, expected ({height}, {width}, 4) "
                f"for {width}x{height}"
            )
        flat = buffer.reshape(-1)
    else:
        flat = np.frombuffer(buffer, dtype=np.uint8)

    expected = width * height * 4
    if flat.size != expected:
        raise ValueError(
            f"RGBA buffer has {flat.size} bytes, expected {expected} "
            f"for {width}x{height} (4 bytes per pixel)"
        )

    rgb = flat.reshape(height, width, 4)[..., :3].astype(np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    gray = wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]

    return np.clip(np.floor(gray + 0.5), 0, 255).astype(np.uint8)


def fit_size(width: int, height: int, max_side: int = 400) -> Tuple[int, int]:
    """Scale dimensions so the longer side is at most max_side.

    Aspect ratio is kept and results are rounded; images already within
    bounds are returned unchanged (never upscaled).

    Examples
    --------
    >>> fit_size(800, 600, 400)
    (400, 300)
    >>> fit_size(120, 90, 400)
    (120, 90)
    """
    w, h = float(width), float(height)
    if w > h:
        if w > max_side:
            h = h * max_side / w
            w = float(max_side)
    elif h > max_side:
        w = w * max_side / h
        h = float(max_side)

    return max(1, int(round(w))), max(1, int(round(h)))


def load_raster(path: Union[str, Path], max_side: int = 400) -> RasterImage:
    """Decode an image file to RGBA and downscale it for tracing.

    Parameters
    ----------
    path : Union[str, Path]
        Any format Pillow can open (PNG, JPEG, BMP, ...)
    max_side : int
        Longest side after downscaling, default 400 px

    Returns
    -------
    RasterImage
        Downscaled RGBA pixels plus original dimensions

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")

    with Image.open(path) as img:
        img_rgba = img.convert('RGBA')

    orig_w, orig_h = img_rgba.size
    target_w, target_h = fit_size(orig_w, orig_h, max_side)

    if (target_w, target_h) != (orig_w, orig_h):
        logger.info(f"Downscaling {path.name} from {orig_w}x{orig_h} to {target_w}x{target_h}")
        img_rgba = img_rgba.resize((target_w, target_h), Image.Resampling.LANCZOS)

    data = np.array(img_rgba, dtype=np.uint8)
    return RasterImage(
        data=data,
        width=target_w,
        height=target_h,
        original_width=orig_w,
        original_height=orig_h,
    )
