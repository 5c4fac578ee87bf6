"""
Image sources.

An image source is one of ArrayImage, PillowImage or RawImage. Each reads
into the same ImageData: an RGBA uint8 pixel array with its dimensions.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Union

import numpy as np
from PIL import Image

from .errors import ValidationError, ensure, is_positive_integer

# Image size limits (security: prevent decompression bombs)
MAX_IMAGE_PIXELS = 50_000_000  # 50 megapixels
MAX_IMAGE_DIMENSION = 10_000  # 10k pixels per side


@dataclass(frozen=True)
class ImageData:
    pixels: np.ndarray  # (height, width, 4) uint8 RGBA
    width: int
    height: int


def check_image_size(
    width: int,
    height: int,
    max_pixels: int = MAX_IMAGE_PIXELS,
    max_dimension: int = MAX_IMAGE_DIMENSION,
) -> None:
    """
    Raises:
        ValidationError: If the image exceeds the size limits
    """
    if width > max_dimension or height > max_dimension:
        raise ValidationError(
            f"Image dimensions {width}x{height} exceed maximum "
            f"{max_dimension}x{max_dimension}"
        )
    if width * height > max_pixels:
        raise ValidationError(
            f"Image has {width * height:,} pixels, exceeding maximum {max_pixels:,}"
        )


def _to_rgba(pixels: np.ndarray) -> np.ndarray:
    if pixels.ndim == 2:
        pixels = pixels[:, :, np.newaxis]
    ensure(pixels.ndim == 3, f"Pixels must have shape (height, width[, channels]), got {pixels.shape}")
    channels = pixels.shape[2]
    if channels == 1:
        pixels = np.repeat(pixels, 3, axis=2)
    elif channels not in (3, 4):
        raise ValidationError(f"Unsupported channel count: {channels}")
    if pixels.shape[2] == 3:
        alpha = np.full(pixels.shape[:2] + (1,), 255, dtype=np.uint8)
        pixels = np.concatenate([pixels, alpha], axis=2)
    return np.ascontiguousarray(pixels, dtype=np.uint8)


@dataclass(frozen=True)
class ArrayImage:
    """Pixels already in memory, (height, width) gray or (height, width, 3|4) RGB(A)."""
    pixels: np.ndarray
    kind: Literal['array'] = 'array'

    def read(self, max_pixels: int = MAX_IMAGE_PIXELS, max_dimension: int = MAX_IMAGE_DIMENSION) -> ImageData:
        pixels = np.asarray(self.pixels)
        ensure(
            pixels.size == 0 or (pixels.min() >= 0 and pixels.max() <= 255),
            'Pixel values must be in [0, 255]',
        )
        rgba = _to_rgba(pixels)
        height, width = rgba.shape[:2]
        check_image_size(width, height, max_pixels, max_dimension)
        return ImageData(pixels=rgba, width=width, height=height)


@dataclass(frozen=True)
class PillowImage:
    """A Pillow image, or a path opened lazily with Pillow."""
    image: Union[Image.Image, str, Path]
    kind: Literal['pillow'] = 'pillow'

    def read(self, max_pixels: int = MAX_IMAGE_PIXELS, max_dimension: int = MAX_IMAGE_DIMENSION) -> ImageData:
        image = self.image
        if not isinstance(image, Image.Image):
            try:
                image = Image.open(image)
            except FileNotFoundError:
                raise FileNotFoundError(f"Image not found: {self.image}")
            except Exception as e:
                raise ValidationError(f"Could not open image: {e}") from e

        width, height = image.size
        check_image_size(width, height, max_pixels, max_dimension)
        rgba = np.array(image.convert('RGBA'), dtype=np.uint8)
        return ImageData(pixels=rgba, width=width, height=height)


@dataclass(frozen=True)
class RawImage:
    """A flat, row-major buffer of 8-bit samples."""
    data: bytes
    width: int
    height: int
    channels: int = 4
    kind: Literal['raw'] = 'raw'

    def read(self, max_pixels: int = MAX_IMAGE_PIXELS, max_dimension: int = MAX_IMAGE_DIMENSION) -> ImageData:
        ensure(is_positive_integer(self.width), f"The width({self.width}) must be a positive integer")
        ensure(is_positive_integer(self.height), f"The height({self.height}) must be a positive integer")
        ensure(self.channels in (1, 3, 4), f"Unsupported channel count: {self.channels}")
        check_image_size(self.width, self.height, max_pixels, max_dimension)
        expected = self.width * self.height * self.channels
        ensure(
            len(self.data) == expected,
            f"The buffer holds {len(self.data)} bytes, expected {expected} for "
            f"{self.width}x{self.height}x{self.channels}",
        )
        pixels = np.frombuffer(bytes(self.data), dtype=np.uint8).reshape(self.height, self.width, self.channels)
        return ImageData(pixels=_to_rgba(pixels), width=self.width, height=self.height)


ImageSource = Union[ArrayImage, PillowImage, RawImage]


def read_image(
    source: ImageSource,
    max_pixels: int = MAX_IMAGE_PIXELS,
    max_dimension: int = MAX_IMAGE_DIMENSION,
) -> ImageData:
    """
    Read any image source, enforcing the size limits.

    Raises:
        ValidationError: If the source kind is unknown or the image is too large
    """
    if not isinstance(source, (ArrayImage, PillowImage, RawImage)):
        raise ValidationError(f"Unsupported image source: {type(source).__name__}")
    return source.read(max_pixels, max_dimension)
