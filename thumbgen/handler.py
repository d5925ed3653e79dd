"""
Platform entry point for storage-finalize triggers.

Bind ``thumbgen.handler.handle`` as the function your hosting platform calls
when an object is uploaded. Failures are raised so the platform's own retry
policy applies; skips and completions return a result dictionary.
"""

import logging
from functools import lru_cache
from typing import Optional

from .handler_config import HandlerConfig
from .naming import NamingPolicy
from .object_ref import ObjectEvent
from .pipeline import ThumbnailPipeline
from .s3_client import S3Client
from .s3_config import S3Config
from .thumbnail_generator import ThumbnailGenerator


def setup_logging(level) -> logging.Logger:
    """Configure logging."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    return logging.getLogger('thumbgen')


def build_pipeline(
    config: HandlerConfig,
    store,
    logger: Optional[logging.Logger] = None
) -> ThumbnailPipeline:
    """
    Build a pipeline from handler settings and an object store.

    Raises:
        ValueError: If the configuration is invalid
    """
    errors = config.validate()
    if errors:
        raise ValueError("Invalid handler configuration: " + "; ".join(errors))

    return ThumbnailPipeline(
        store=store,
        thumbnail_generator=ThumbnailGenerator(config.thumbnail_spec(), quality=config.quality, logger=logger),
        naming=NamingPolicy(config.prefix),
        logger=logger,
    )


@lru_cache(maxsize=1)
def get_default_pipeline() -> ThumbnailPipeline:
    """Lazy-initialized process-wide pipeline configured from the environment."""
    config = HandlerConfig.from_env()
    logger = setup_logging(config.log_level)

    s3_config = S3Config.from_env()
    errors = s3_config.validate()
    if errors:
        raise ValueError("Invalid S3 configuration: " + "; ".join(errors))

    return build_pipeline(config, S3Client(s3_config, logger), logger)


def handle(event: dict, context=None) -> dict:
    """
    Handle one storage upload notification.

    Args:
        event: Trigger payload ({bucket, name, contentType} or an S3 record)
        context: Platform invocation context (unused)

    Returns:
        PipelineResult as a dictionary
    """
    pipeline = get_default_pipeline()
    return pipeline.handle(ObjectEvent.from_dict(event)).to_dict()
