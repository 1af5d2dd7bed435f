"""Factory classes for creating configured service instances."""

from typing import TYPE_CHECKING, Any, Optional

import boto3

from ..processors import get_processor
from .config import load_config
from .models import ConversionConfig
from .observability import create_logger
from .protocols import LoggerProtocol, S3ClientProtocol
from .services import ConversionOrchestrator, SourceLoader, VariantConversionExecutor

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str = "image-variants") -> LoggerProtocol:
        """Create a structured logger honoring LOG_LEVEL and LOG_FORMAT."""
        return create_logger(name)


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(**kwargs: Any) -> "S3Client":
        """Create S3 client with optional configuration, e.g. ``region_name``."""
        session = boto3.Session()
        return session.client("s3", **kwargs)


class ConversionPipelineFactory:
    """Factory for creating the complete conversion pipeline."""

    @staticmethod
    def create_pipeline(
        s3_client: Optional[S3ClientProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        config: Optional[ConversionConfig] = None,
    ) -> ConversionOrchestrator:
        """Create a fully configured orchestrator, defaulting to env config and a real S3 client."""
        if config is None:
            config = load_config()

        if s3_client is None:
            s3_client = S3ClientFactory.create_s3_client()

        if logger is None:
            logger = LoggerFactory.create_logger()

        return ConversionOrchestrator(
            source_loader=SourceLoader(s3_client, logger),
            executor=VariantConversionExecutor(s3_client, logger),
            config=config,
            logger=logger,
            variant_processor=get_processor(config.processor),
        )
