"""Testing utilities and fakes for the image variants worker."""

from .fakes import (
    FakeS3Client,
    FakeLogger,
    S3Object,
    S3Bucket,
    create_test_config,
    create_test_image,
    destination_bucket,
    setup_test_s3_environment,
)

__all__ = [
    "FakeS3Client",
    "FakeLogger",
    "S3Object",
    "S3Bucket",
    "create_test_config",
    "create_test_image",
    "destination_bucket",
    "setup_test_s3_environment",
]
