"""Error taxonomy for set-log operations."""

from __future__ import annotations


class SetLogError(Exception):
    """Base class; error_type is the stable string reported in tool output."""

    error_type = "invalid_argument"


class InvalidArgument(SetLogError):
    """Malformed or missing fields in a write request. Caller-correctable."""

    error_type = "invalid_argument"


class NotFound(SetLogError):
    """A row id does not resolve to a physical row in the sheet."""

    error_type = "not_found"


class StoreUnavailable(SetLogError):
    """The sheet cannot be reached or credentials cannot be loaded."""

    error_type = "store_unavailable"
