# src/image_variants/core/error_handling.py

import functools
import logging
import time
from typing import Optional, Type

from botocore.exceptions import BotoCoreError, ClientError
from PIL import UnidentifiedImageError

from .exceptions import DecodeError, ImageVariantsError, StorageError

RETRYABLE_S3_ERROR_CODES = (
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "SlowDown",
    "RequestTimeout",
    "InternalError",
)


def storage_error_code(error: BaseException) -> Optional[str]:
    """
    Return the S3 error code behind a storage error, if there is one.

    Works on a raw botocore ClientError as well as on a StorageError that
    was raised from one.
    """
    candidate = error if isinstance(error, ClientError) else error.__cause__
    if isinstance(candidate, ClientError):
        return candidate.response.get("Error", {}).get("Code")
    return None


def with_error_handling(func=None, *, storage_error: Type[StorageError] = StorageError):
    """
    A decorator to wrap functions with standardized error handling.

    botocore failures become ``storage_error`` and undecodable images become
    DecodeError; pipeline errors and anything else are re-raised. Tracebacks
    go to DEBUG only, since callers report the failure themselves.
    Usable bare (``@with_error_handling``) or with arguments.
    """
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(fn.__module__ + "." + fn.__name__)
            try:
                return fn(*args, **kwargs)
            except ImageVariantsError:
                logger.debug(f"Pipeline error in '{fn.__name__}'", exc_info=True)
                raise
            except (ClientError, BotoCoreError) as e:
                logger.debug(f"Error in '{fn.__name__}': {e}", exc_info=True)
                raise storage_error(f"S3 operation failed in {fn.__name__}: {e}") from e
            except UnidentifiedImageError as e:
                logger.debug(f"Error in '{fn.__name__}': {e}", exc_info=True)
                raise DecodeError(f"Failed to identify image in {fn.__name__}: {e}") from e
            except Exception as e:
                logger.debug(f"Error in '{fn.__name__}': {e}", exc_info=True)
                raise
        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


def retry_s3_operation(max_attempts=3, initial_delay=1, backoff_factor=2):
    """
    Decorator to retry S3 operations with exponential backoff.

    Only StorageErrors caused by a throttling or transient S3 error code are
    retried; every other error is raised on the first attempt.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(func.__module__ + "." + func.__name__)
            attempts = 0
            delay = initial_delay
            while True:
                try:
                    return func(*args, **kwargs)
                except StorageError as e:
                    attempts += 1
                    if storage_error_code(e) not in RETRYABLE_S3_ERROR_CODES:
                        logger.debug(f"S3 operation '{func.__name__}' failed with non-retryable error: {e}")
                        raise
                    if attempts >= max_attempts:
                        logger.warning(
                            f"S3 operation '{func.__name__}' failed after {max_attempts} attempts. Error: {e}"
                        )
                        raise

                    logger.info(
                        f"S3 operation '{func.__name__}' failed. Attempt {attempts}/{max_attempts}. "
                        f"Retrying in {delay:.2f}s. Error: {e}"
                    )
                    time.sleep(delay)
                    delay *= backoff_factor
        return wrapper
    return decorator


class VariantBatchContext:
    """
    Context manager for one event's variant run, collecting failures and
    logging a summary when the run ends.
    """
    def __init__(self, operation_name="Variant conversion"):
        self.operation_name = operation_name
        self.errors = []
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    def __enter__(self):
        self.logger.info(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb)
            )
        elif self.errors:
            # Per-variant details are logged by the caller as each outcome is reported
            failed = ", ".join(error_detail["item"] for error_detail in self.errors)
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.errors)} error(s): {failed}"
            )
        else:
            self.logger.info(f"{self.operation_name} completed successfully.")
        return False

    def add_error(self, error_message: str, item_identifier: str = "Unknown variant"):
        """
        Report a failed variant from within the 'with' block.

        Args:
            error_message (str): The error message or exception string.
            item_identifier (str): The variant name that failed.
        """
        self.errors.append({"item": item_identifier, "error": str(error_message)})
        self.logger.debug(f"Error added for variant '{item_identifier}' in {self.operation_name}: {error_message}")
