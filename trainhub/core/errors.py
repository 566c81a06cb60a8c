"""
Application error taxonomy.

Every error carries a human-readable ``message``, a machine-readable ``code``
and the HTTP ``status_code`` the API layer answers with. Repositories and
services raise them; ``trainhub.app`` turns them into the JSON envelope
``{"ok": false, "error": message}``. A ValidationFailure also names the
offending input in ``field``.
"""

from __future__ import annotations


class TrainHubError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    @property
    def public_message(self) -> str:
        return self.message


class NotFoundError(TrainHubError):
    status_code = 404
    code = "not_found"


class AlreadyExistsError(TrainHubError):
    status_code = 409
    code = "already_exists"


class ForbiddenError(TrainHubError):
    status_code = 403
    code = "forbidden"


class ValidationFailure(TrainHubError):
    status_code = 400
    code = "invalid"

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class PersistenceFailure(TrainHubError):
    """The backing file could not be written.

    ``message`` keeps the internal detail for logs; clients only ever see
    ``public_message``.
    """

    status_code = 500
    code = "persistence_failure"

    def __init__(self, message: str, *, public_message: str = "failed to save data"):
        super().__init__(message)
        self._public_message = public_message

    @property
    def public_message(self) -> str:
        return self._public_message


class BarcodeLookupError(TrainHubError):
    status_code = 502
    code = "barcode_lookup_failed"
