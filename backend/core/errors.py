# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Typed failures raised by the access, vault and events services.

The services never log and never build HTTP responses.  ``main.py`` turns
any :class:`VaultCoreError` into a JSON error with ``status_code``.
"""

from fastapi import status


class VaultCoreError(Exception):
    """Base class.  ``status_code`` is the HTTP mapping used by main.py."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(VaultCoreError):
    """A referenced cipher, folder or collection does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class PermissionDeniedError(VaultCoreError):
    """The access resolver refused the caller."""

    status_code = status.HTTP_403_FORBIDDEN


class InconsistentStateError(VaultCoreError):
    """A link row that the current state promised was not there."""

    status_code = status.HTTP_409_CONFLICT


class StoreFailureError(VaultCoreError):
    """The database is unavailable or rejected a write."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
