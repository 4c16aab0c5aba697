from __future__ import annotations


class HotspotGateError(Exception):
    """Base exception for all hotspot gate errors.

    ``reason`` is the human-readable string returned to the caller,
    ``detail`` is operator-facing context that is logged and echoed on the
    HTML error page.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    title: str = "Service Error"
    retryable: bool = True

    def __init__(self, reason: str, detail: str | None = None) -> None:
        self.reason = reason
        self.detail = detail
        super().__init__(reason)


class ConfigurationError(HotspotGateError):
    status_code = 500
    error_code = "CONFIGURATION_ERROR"
    title = "Configuration Error"
    retryable = False


class MethodNotAllowedError(HotspotGateError):
    status_code = 405
    error_code = "METHOD_NOT_ALLOWED"
    title = "Method Not Allowed"
    retryable = False


class MissingFieldsError(HotspotGateError):
    status_code = 400
    error_code = "BAD_REQUEST"
    title = "Bad Request"
    retryable = False


class InvalidCredentialError(HotspotGateError):
    status_code = 403
    error_code = "FORBIDDEN"
    title = "Authentication Required"
    retryable = False


class NetworkNotAllowedError(HotspotGateError):
    status_code = 403
    error_code = "NETWORK_NOT_ALLOWED"
    title = "Access Denied"
    retryable = False


class RateLimitExceededError(HotspotGateError):
    status_code = 429
    error_code = "RATE_LIMITED"
    title = "Too Many Requests"


class TokenInvalidError(HotspotGateError):
    status_code = 403
    error_code = "TOKEN_INVALID"
    title = "Access Denied"
    retryable = False


class TokenExpiredError(HotspotGateError):
    status_code = 403
    error_code = "TOKEN_EXPIRED"
    title = "Session Expired"
    retryable = False


class ProxyRequestError(HotspotGateError):
    status_code = 400
    error_code = "BAD_REQUEST"
    title = "Bad Request"
    retryable = False


class ProxyFetchError(HotspotGateError):
    status_code = 500
    error_code = "PROXY_FETCH_FAILED"
    title = "Service Error"
