"""Error types and upstream error classification"""

from typing import Optional

from azure.core.exceptions import HttpResponseError

from ..utils.logger import setup_logger

SKIPPABLE_ERROR_CODES = frozenset({
    "MissingRegistrationForResourceProvider",
    "MissingSubscriptionRegistration",
    "DisallowedOperation",
})

logger = setup_logger("errors")


class AzqrError(Exception):
    """Base error for Azure Quick Review"""


class ConfigurationError(AzqrError):
    """Invalid configuration, filter file or missing credential"""


class ScanCancelledError(AzqrError):
    """The scan was cancelled through its cancellation handle"""


def error_code(err: BaseException) -> Optional[str]:
    """Extract the ARM error code from an upstream error"""
    if not isinstance(err, HttpResponseError):
        return None
    odata = getattr(err, "error", None)
    code = getattr(odata, "code", None)
    return code or getattr(err, "code", None)


def should_skip_error(err: BaseException) -> bool:
    """True when the upstream error is a known benign subscription state"""
    code = error_code(err)
    if code in SKIPPABLE_ERROR_CODES:
        logger.warning(f"Subscription failed with code: {code}. Skipping Scan...")
        return True
    return False


def is_permission_error(err: BaseException) -> bool:
    """True for 403 responses and AuthorizationFailed codes"""
    if not isinstance(err, HttpResponseError):
        return False
    return err.status_code == 403 or error_code(err) == "AuthorizationFailed"
