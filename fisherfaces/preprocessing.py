"""
Image Preprocessing - from an image file to a sample vector.

Pipeline (one image):
  1. Decode (PIL)
  2. Resize to W × H (bilinear)
  3. Luminance: Y = 0.299 R + 0.587 G + 0.114 B
  4. Histogram equalization over 256 bins
  5. Flatten row-major (y-major, x-minor) -> vector of length W·H in [0, 255]

Histogram equalization mapping:
  h(v) = round( (cdf(v) - cdf_min) / (total - 1) · 255 )
  where cdf_min is the first non-zero value of the cumulative histogram.
"""

import numpy as np
from PIL import Image

from fisherfaces.config import (
    IMAGE_WIDTH, IMAGE_HEIGHT, LUMINANCE_WEIGHTS, HIST_BINS
)


def _round_half_up(x):
    return np.floor(np.asarray(x, dtype=np.float64) + 0.5)


# ==============================================================================
# 1. LUMINANCE
# ==============================================================================

def to_luminance(rgb, weights=LUMINANCE_WEIGHTS):
    """
    Convert an RGB array to luminance.

    Args:
        rgb: np.ndarray shape (H, W, 3), values in [0, 255]
        weights: (w_R, w_G, w_B)

    Returns:
        np.ndarray shape (H, W), float64
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    return rgb[..., 0] * weights[0] + rgb[..., 1] * weights[1] + rgb[..., 2] * weights[2]


# ==============================================================================
# 2. HISTOGRAM EQUALIZATION
# ==============================================================================

def histogram_equalization(gray, bins=HIST_BINS):
    """
    Histogram equalization of a grayscale image.

    Algorithm:
        1. Quantize intensities to integers in [0, bins - 1]
        2. hist[k] = number of pixels with intensity k
        3. cdf[k] = Σ_{i≤k} hist[i]; cdf_min = first non-zero cdf
        4. lut[k] = round((cdf[k] - cdf_min) / (total - 1) · (bins - 1))
        5. result = lut[image]

    Args:
        gray: np.ndarray shape (H, W)
        bins: Number of intensity levels

    Returns:
        np.ndarray shape (H, W), float64, values in [0, bins - 1]
    """
    img = np.clip(_round_half_up(gray), 0, bins - 1).astype(np.int64)
    total = img.size
    if total <= 1:
        return np.zeros(img.shape, dtype=np.float64)

    # Step 1: histogram
    hist = np.bincount(img.ravel(), minlength=bins)

    # Step 2: cumulative distribution
    cdf = np.cumsum(hist)
    cdf_min = cdf[np.nonzero(cdf)[0][0]]

    # Step 3: lookup table
    lut = _round_half_up((cdf - cdf_min) / (total - 1) * (bins - 1))
    lut = np.clip(lut, 0, bins - 1)

    return lut[img]


# ==============================================================================
# 3. FULL PIPELINE
# ==============================================================================

def preprocess_image(image, width=IMAGE_WIDTH, height=IMAGE_HEIGHT):
    """
    Preprocess a decoded PIL image into a sample vector.

    Args:
        image: PIL.Image.Image in any mode
        width, height: Resize target

    Returns:
        np.ndarray shape (width * height,), float64, row-major
    """
    resized = image.convert("RGB").resize((width, height), Image.BILINEAR)
    gray = to_luminance(np.asarray(resized))
    return histogram_equalization(gray).ravel()


def load_face_vector(path, width=IMAGE_WIDTH, height=IMAGE_HEIGHT):
    """
    Load an image file -> preprocessed sample vector.

    Raises:
        OSError: the file cannot be read or decoded (PIL raises
            UnidentifiedImageError, an OSError subclass)
    """
    with Image.open(path) as img:
        img.load()
        return preprocess_image(img, width, height)
