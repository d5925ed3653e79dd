"""
HandlerConfig - Tunable settings for the thumbnail handler.
"""

import logging
import os
from dataclasses import dataclass
from typing import List

from .naming import NamingPolicy
from .thumbnail_spec import ThumbnailSpec


@dataclass
class HandlerConfig:
    """
    Thumbnail handler settings.

    Attributes:
        max_width: Maximum thumbnail width (THUMB_MAX_WIDTH)
        max_height: Maximum thumbnail height (THUMB_MAX_HEIGHT)
        allow_enlargement: Upscale images smaller than the box (THUMB_ALLOW_ENLARGEMENT)
        prefix: Filename prefix marking thumbnails (THUMB_PREFIX)
        quality: JPEG/WebP quality (THUMB_QUALITY)
        log_level: Logging level name (LOG_LEVEL)
    """
    max_width: int = 200
    max_height: int = 200
    allow_enlargement: bool = False
    prefix: str = NamingPolicy.DEFAULT_PREFIX
    quality: int = 85
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls) -> 'HandlerConfig':
        """
        Create config from environment variables, falling back to defaults.

        Raises:
            ValueError: If a numeric variable is not an integer
        """
        defaults = cls()
        return cls(
            max_width=int(os.getenv('THUMB_MAX_WIDTH') or defaults.max_width),
            max_height=int(os.getenv('THUMB_MAX_HEIGHT') or defaults.max_height),
            allow_enlargement=(os.getenv('THUMB_ALLOW_ENLARGEMENT') or '').strip().lower()
            in ('1', 'true', 'yes', 'on'),
            prefix=os.getenv('THUMB_PREFIX') or defaults.prefix,
            quality=int(os.getenv('THUMB_QUALITY') or defaults.quality),
            log_level=(os.getenv('LOG_LEVEL') or defaults.log_level).upper(),
        )

    def validate(self) -> List[str]:
        """Return a list of configuration errors (empty if valid)."""
        errors = []
        if self.max_width <= 0:
            errors.append(f"max_width must be positive, got {self.max_width}")
        if self.max_height <= 0:
            errors.append(f"max_height must be positive, got {self.max_height}")
        if not self.prefix:
            errors.append("prefix must not be empty")
        elif '/' in self.prefix:
            errors.append(f"prefix must not contain '/', got {self.prefix!r}")
        if not 1 <= self.quality <= 100:
            errors.append(f"quality must be between 1 and 100, got {self.quality}")
        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"Unknown log level: {self.log_level}")
        return errors

    def thumbnail_spec(self) -> ThumbnailSpec:
        return ThumbnailSpec(
            max_width=self.max_width,
            max_height=self.max_height,
            allow_enlargement=self.allow_enlargement,
        )
