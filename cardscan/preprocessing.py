"""
Image preprocessing for the contrast-enhanced recognition pass.
"""

import io
import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

ImageInput = Union[bytes, bytearray, str, Path, np.ndarray]

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)
CONTRAST_MIDPOINT = 128.0


class ImagePreprocessor:
    """Decodes card images and prepares the enhanced variant."""

    def __init__(self, max_width: int = 2600, max_scale: float = 2.0, contrast: float = 1.45):
        self.max_width = max_width
        self.max_scale = max_scale
        self.contrast = contrast

    @staticmethod
    def decode_image(image: ImageInput) -> np.ndarray:
        """Decode an encoded image (bytes, path or array) to a BGR/gray array.

        Args:
            image: Encoded bytes, a file path, or an already decoded array

        Returns:
            Decoded image as numpy array
        """
        if isinstance(image, np.ndarray):
            return image

        if isinstance(image, (str, Path)):
            img = cv2.imread(str(image), cv2.IMREAD_COLOR)
            if img is None:
                raise ValueError(f"Could not read image: {image}")
            return img

        data = bytes(image)
        img = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
        if img is not None:
            return img

        # OpenCV cannot decode GIF; Pillow can
        try:
            with Image.open(io.BytesIO(data)) as pil_image:
                rgb = np.array(pil_image.convert("RGB"))
        except Exception as e:
            raise ValueError(f"Could not decode image bytes: {e}") from e
        return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)

    def enhance_for_ocr(self, image: ImageInput) -> np.ndarray:
        """Upscale, convert to grayscale and stretch contrast.

        The image is scaled up to max_scale, never beyond max_width pixels
        wide, then mapped through (v - 128) * contrast + 128 clamped to
        [0, 255].
        """
        img = self.decode_image(image)
        h, w = img.shape[:2]

        scale = max(1.0, min(self.max_scale, self.max_width / float(w)))
        if scale > 1.0:
            new_w = int(round(w * scale))
            new_h = int(round(h * scale))
            img = cv2.resize(img, (new_w, new_h), interpolation=cv2.INTER_CUBIC)
            logger.debug(f"Resized from {w}x{h} to {new_w}x{new_h}")

        gray = self.to_grayscale(img)
        stretched = (gray - CONTRAST_MIDPOINT) * self.contrast + CONTRAST_MIDPOINT
        return np.clip(stretched, 0, 255).astype(np.uint8)

    @staticmethod
    def to_grayscale(img: np.ndarray) -> np.ndarray:
        """Luminance of a BGR(A) image as float32."""
        if img.ndim == 2:
            return img.astype(np.float32)
        channels = img[:, :, :3].astype(np.float32)
        r_w, g_w, b_w = LUMA_WEIGHTS
        return channels[:, :, 2] * r_w + channels[:, :, 1] * g_w + channels[:, :, 0] * b_w
