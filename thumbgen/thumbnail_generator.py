"""
ThumbnailGenerator - Decodes, bounded-fit resizes and re-encodes images.
"""

import io
import logging
import math
from typing import Optional, Tuple

from PIL import Image

from .errors import DecodeError, EncodeError, UnsupportedFormatError
from .thumbnail_spec import ImageBuffer, ThumbnailSpec


class ThumbnailGenerator:
    """
    Generates thumbnails from in-memory images using Pillow.

    The output keeps the input's container format (PNG stays PNG, JPEG stays
    JPEG). Instances hold only immutable settings and can be shared between
    concurrent invocations.
    """

    SUPPORTED_CONTENT_TYPES = {
        'image/jpeg': 'JPEG',
        'image/jpg': 'JPEG',
        'image/pjpeg': 'JPEG',
        'image/png': 'PNG',
        'image/gif': 'GIF',
        'image/webp': 'WEBP',
        'image/bmp': 'BMP',
        'image/tiff': 'TIFF',
    }

    # Pillow sometimes reports a more specific format for the same container
    FORMAT_ALIASES = {
        'MPO': 'JPEG',
    }

    def __init__(
        self,
        spec: Optional[ThumbnailSpec] = None,
        quality: int = 85,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail generator.

        Args:
            spec: Bounding box for thumbnails (default: 200x200, no enlargement)
            quality: JPEG/WebP quality for output (default: 85)
            logger: Optional logger instance
        """
        self.spec = spec or ThumbnailSpec()
        self.quality = quality
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def normalize_content_type(cls, content_type: Optional[str]) -> str:
        """Strip parameters and case from a content type."""
        if not content_type:
            return ''
        return content_type.split(';', 1)[0].strip().lower()

    def get_format(self, content_type: Optional[str]) -> str:
        """
        Get the Pillow format for a content type.

        Raises:
            UnsupportedFormatError: If the content type is not a supported image type
        """
        normalized = self.normalize_content_type(content_type)
        try:
            return self.SUPPORTED_CONTENT_TYPES[normalized]
        except KeyError:
            raise UnsupportedFormatError(f"Unsupported image content type: {content_type!r}") from None

    def compute_size(self, width: int, height: int) -> Tuple[int, int]:
        """
        Compute bounded-fit output dimensions.

        scale = min(max_width / width, max_height / height, cap), where cap is
        1.0 unless enlargement is allowed. Dimensions round half up.

        Raises:
            DecodeError: If the source has no area
            EncodeError: If the result would have no area
        """
        if width <= 0 or height <= 0:
            raise DecodeError(f"Image has no area: {width}x{height}")

        scale = min(self.spec.max_width / width, self.spec.max_height / height)
        if not self.spec.allow_enlargement:
            scale = min(scale, 1.0)

        new_width = int(math.floor(width * scale + 0.5))
        new_height = int(math.floor(height * scale + 0.5))

        if new_width <= 0 or new_height <= 0:
            raise EncodeError(
                f"Resizing {width}x{height} into {self.spec.max_width}x{self.spec.max_height} "
                f"gives a zero-area image ({new_width}x{new_height})"
            )
        return new_width, new_height

    def generate(self, image_data: bytes, content_type: str) -> ImageBuffer:
        """
        Generate a thumbnail from image data.

        Args:
            image_data: Original image as bytes
            content_type: Declared content type of image_data

        Returns:
            ImageBuffer in the same format and content type as the input

        Raises:
            UnsupportedFormatError: Content type is not a supported image type
            DecodeError: Bytes are not a valid image of the declared format
            EncodeError: The thumbnail could not be encoded
        """
        output_format = self.get_format(content_type)
        img = self._decode(image_data, output_format)

        size = self.compute_size(*img.size)
        self.logger.debug(f"Resizing {img.size[0]}x{img.size[1]} -> {size[0]}x{size[1]}")

        img = self._convert_color_mode(img, output_format)
        if img.size != size:
            img = img.resize(size, Image.Resampling.LANCZOS)

        data = self._encode(img, output_format)
        return ImageBuffer(
            data=data,
            content_type=self.normalize_content_type(content_type),
            format=output_format,
            width=size[0],
            height=size[1],
        )

    def _decode(self, image_data: bytes, expected_format: str) -> Image.Image:
        """Open and fully load image data, checking it matches the declared format."""
        if not image_data:
            raise DecodeError("Image data is empty")
        try:
            img = Image.open(io.BytesIO(image_data))
            img.load()
        except Image.DecompressionBombError as e:
            raise DecodeError(f"Image is too large to decode: {e}") from e
        except (OSError, SyntaxError, ValueError) as e:
            raise DecodeError(f"Cannot decode image: {e}") from e

        actual_format = self.FORMAT_ALIASES.get(img.format, img.format)
        if actual_format != expected_format:
            raise DecodeError(
                f"Image data is {img.format or 'unknown'}, declared content type expects {expected_format}"
            )
        return img

    def _encode(self, img: Image.Image, output_format: str) -> bytes:
        output = io.BytesIO()
        try:
            if output_format == 'JPEG':
                img.save(output, format='JPEG', quality=self.quality, optimize=True)
            elif output_format == 'PNG':
                img.save(output, format='PNG', optimize=True)
            elif output_format == 'WEBP':
                img.save(output, format='WEBP', quality=self.quality)
            else:
                img.save(output, format=output_format)
        except (OSError, ValueError, KeyError) as e:
            raise EncodeError(f"Cannot encode {output_format} thumbnail: {e}") from e

        data = output.getvalue()
        if not data:
            raise EncodeError(f"Encoding {output_format} thumbnail produced no data")
        return data

    def _convert_color_mode(self, img: Image.Image, output_format: str) -> Image.Image:
        """Convert image to a color mode the output format can store."""
        if output_format == 'JPEG':
            # JPEG has no alpha; flatten onto white
            if img.mode in ('RGBA', 'LA'):
                background = Image.new('RGB', img.size, (255, 255, 255))
                if img.mode == 'LA':
                    img = img.convert('RGBA')
                background.paste(img, mask=img.split()[-1])
                return background
            elif img.mode == 'P':
                img = img.convert('RGBA')
                background = Image.new('RGB', img.size, (255, 255, 255))
                background.paste(img, mask=img.split()[-1])
                return background
            elif img.mode not in ('RGB', 'L', 'CMYK'):
                return img.convert('RGB')
            return img

        if img.mode in ('1', 'L', 'LA', 'P', 'RGB', 'RGBA'):
            return img
        if img.mode in ('PA', 'RGBa', 'La'):
            return img.convert('RGBA')
        return img.convert('RGB')
