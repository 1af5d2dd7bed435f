"""Service implementations for the variant conversion pipeline."""

import time
import uuid
from typing import Any, Callable, List, Optional

from .encoders import Encoder, resolve_encoder
from .error_handling import (
    VariantBatchContext,
    retry_s3_operation,
    storage_error_code,
    with_error_handling,
)
from .events import parse_notifications
from .exceptions import (
    ImageVariantsError,
    InvalidReferenceError,
    StorageReadError,
    StorageWriteError,
)
from .image_utils import describe_image, resize_image
from .models import (
    ConversionConfig,
    ConversionOutcome,
    ConversionReport,
    EncodedImage,
    OutcomeStatus,
    ReportStatus,
    SourceCreatedNotification,
    SourceImageReference,
    VariantSettings,
)
from .naming import extension_of, name_for, object_url, parse_object_url
from .observability import LogContext
from .protocols import LoggerProtocol, S3ClientProtocol, VariantProcessor
from .sizing import plan_size

MISSING_OBJECT_CODES = ("NoSuchKey", "404", "NotFound", "NoSuchBucket")

TimeRemaining = Callable[[], int]


@retry_s3_operation()
@with_error_handling(storage_error=StorageReadError)
def _download_s3_object(s3_client: S3ClientProtocol, bucket: str, key: str) -> bytes:
    response = s3_client.get_object(Bucket=bucket, Key=key)
    return response["Body"].read()


@retry_s3_operation()
@with_error_handling(storage_error=StorageWriteError)
def _upload_s3_object(
    s3_client: S3ClientProtocol, bucket: str, key: str, data: bytes, content_type: str
) -> None:
    s3_client.put_object(Bucket=bucket, Key=key, Body=data, ContentType=content_type)


class SourceLoader:
    """Reads the uploaded object a notification points to."""

    def __init__(self, s3_client: S3ClientProtocol, logger: LoggerProtocol):
        self._s3_client = s3_client
        self._logger = logger

    def load(
        self,
        notification: SourceCreatedNotification,
        log_context: Optional[LogContext] = None,
    ) -> Optional[SourceImageReference]:
        """
        Download the source object.

        Returns None when there is nothing readable to convert: the URL does
        not identify an object, the object is gone or empty, or the read
        failed.
        """
        context = (log_context or LogContext()).with_operation("load_source")

        try:
            location = parse_object_url(notification.url)
            data = _download_s3_object(self._s3_client, location.container, location.name)
        except InvalidReferenceError as e:
            self._logger.error("Cannot locate source object", context.with_metadata(error=str(e)))
            return None
        except StorageReadError as e:
            if storage_error_code(e) in MISSING_OBJECT_CODES:
                self._logger.warning("Source object no longer exists", context)
            else:
                self._logger.error("Source object could not be read", context.with_metadata(error=str(e)))
            return None
        except Exception as e:
            self._logger.error(
                "Source object could not be read",
                context.with_metadata(error=f"{type(e).__name__}: {e}"),
            )
            return None

        if not data:
            self._logger.info("Source object is empty, nothing to convert", context)
            return None

        self._logger.debug("Source object downloaded", context, size_bytes=len(data))
        return SourceImageReference(
            url=notification.url, extension=extension_of(notification.url), data=data
        )


class VariantConversionExecutor:
    """Converts and stores one variant; every failure becomes an outcome."""

    def __init__(self, s3_client: S3ClientProtocol, logger: LoggerProtocol):
        self._s3_client = s3_client
        self._logger = logger

    def _store(self, container: str, name: str, encoded: EncodedImage) -> None:
        try:
            _upload_s3_object(
                self._s3_client, container, name, encoded.data, encoded.content_type
            )
        except ImageVariantsError:
            raise
        except Exception as e:
            raise StorageWriteError(f"Writing s3://{container}/{name} failed: {e}") from e

    def convert(
        self,
        source: SourceImageReference,
        encoder: Encoder,
        variant: VariantSettings,
        log_context: Optional[LogContext] = None,
    ) -> ConversionOutcome:
        """
        Resize the source to the variant's width and write it to the
        variant's container, overwriting any object of the same name.

        Never raises; failures are returned as a failed outcome.
        """
        start_time = time.time()
        context = (log_context or LogContext()).with_operation("convert_variant").with_metadata(
            variant=variant.name
        )

        try:
            definition = variant.to_definition()

            image = source.decoded()
            self._logger.debug("Source decoded", context, **describe_image(image))

            width, height = plan_size(image.size, definition.width)
            resized = resize_image(image, width, height)
            encoded = encoder.encode(resized)

            name = name_for(source.url)
            self._store(definition.container, name, encoded)
        except Exception as e:
            return ConversionOutcome.failure(
                variant.name, e, processing_time=time.time() - start_time
            )

        return ConversionOutcome(
            variant=variant.name,
            status=OutcomeStatus.SUCCEEDED,
            destination=object_url(definition.container, name),
            width=width,
            height=height,
            processing_time=time.time() - start_time,
        )


class ConversionOrchestrator:
    """Handles "object created" notifications end to end."""

    def __init__(
        self,
        source_loader: SourceLoader,
        executor: VariantConversionExecutor,
        config: ConversionConfig,
        logger: LoggerProtocol,
        variant_processor: VariantProcessor,
    ):
        self._source_loader = source_loader
        self._executor = executor
        self._config = config
        self._logger = logger
        self._variant_processor = variant_processor

    @property
    def config(self) -> ConversionConfig:
        return self._config

    def _log_outcome(self, outcome: ConversionOutcome, context: LogContext) -> None:
        variant_context = context.with_metadata(variant=outcome.variant)
        if outcome.status == OutcomeStatus.SUCCEEDED:
            self._logger.info(
                "Variant converted",
                variant_context,
                destination=outcome.destination,
                size=f"{outcome.width}x{outcome.height}",
                processing_time_ms=round(outcome.processing_time * 1000, 1),
            )
        elif outcome.status == OutcomeStatus.ABANDONED:
            self._logger.warning("Variant abandoned", variant_context, reason=outcome.error)
        else:
            self._logger.error(
                "Variant conversion failed",
                variant_context,
                error_type=outcome.error_type,
                error=outcome.error,
            )

    def handle(
        self,
        notification: SourceCreatedNotification,
        time_remaining_ms: Optional[TimeRemaining] = None,
    ) -> ConversionReport:
        """
        Convert one uploaded image into every configured variant.

        Unsupported extensions are rejected with a single log line before the
        source is read. A failed variant never stops the remaining ones, and
        no variant failure is raised to the caller.

        Args:
            notification: The "object created" notification
            time_remaining_ms: Optional callable reporting the time left for
                this invocation; variants not yet started when it drops below
                ``config.min_remaining_ms`` are abandoned

        Returns:
            ConversionReport with one outcome per configured variant
        """
        start_time = time.time()
        context = LogContext(
            correlation_id=notification.event_id or str(uuid.uuid4()),
            operation="handle_notification",
            component="conversion_orchestrator",
        ).with_metadata(url=notification.url)

        encoder = resolve_encoder(extension_of(notification.url), self._config.jpeg_quality)
        if encoder is None:
            self._logger.info("No encoder support, skipping all variants", context)
            return ConversionReport(url=notification.url, status=ReportStatus.UNSUPPORTED)

        source = self._source_loader.load(notification, context)
        if source is None:
            return ConversionReport(
                url=notification.url,
                status=ReportStatus.SKIPPED,
                processing_time=time.time() - start_time,
            )

        def should_stop() -> bool:
            if time_remaining_ms is None:
                return False
            return time_remaining_ms() < self._config.min_remaining_ms

        def convert(variant: VariantSettings) -> ConversionOutcome:
            return self._executor.convert(source, encoder, variant, context)

        with VariantBatchContext(f"Variant conversion for {notification.url}") as batch:
            outcomes = self._variant_processor(
                self._config.variants, convert, should_stop, self._config.max_workers
            )
            for outcome in outcomes:
                self._log_outcome(outcome, context)
                if outcome.status == OutcomeStatus.FAILED:
                    batch.add_error(
                        f"{outcome.error_type}: {outcome.error}", item_identifier=outcome.variant
                    )

        report = ConversionReport(
            url=notification.url,
            outcomes=outcomes,
            processing_time=time.time() - start_time,
        )
        self._logger.info(
            "Notification handled",
            context,
            encoder=encoder.name,
            succeeded=report.succeeded_count,
            failed=report.failed_count,
            abandoned=report.abandoned_count,
        )
        return report

    def handle_event(
        self, payload: Any, time_remaining_ms: Optional[TimeRemaining] = None
    ) -> List[ConversionReport]:
        """
        Parse a trigger payload and handle every notification it carries.

        Raises:
            MalformedEventError: If the payload cannot be interpreted at all
        """
        notifications = parse_notifications(payload)
        if not notifications:
            self._logger.info("Payload carries no object created notifications")
        return [self.handle(n, time_remaining_ms) for n in notifications]
