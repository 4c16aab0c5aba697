from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    FORBIDDEN = "FORBIDDEN"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    NETWORK_NOT_ALLOWED = "NETWORK_NOT_ALLOWED"
    RATE_LIMITED = "RATE_LIMITED"
    TOKEN_INVALID = "TOKEN_INVALID"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    PROXY_FETCH_FAILED = "PROXY_FETCH_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class BindingMode(str, Enum):
    """Which issuance/validation policy a deployment runs."""

    IP_AND_IDENTITY = "IP_AND_IDENTITY"
    KEY_ONLY = "KEY_ONLY"


class GuardState(str, Enum):
    UNINITIALIZED = "UNINITIALIZED"
    UNLOCKED = "UNLOCKED"
    SILENT_LOCKED = "SILENT_LOCKED"
    LOCKED_WITH_RETRY = "LOCKED_WITH_RETRY"
