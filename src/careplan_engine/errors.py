"""Engine exceptions.

Every failure the engine reports is a :class:`CarePlanError` carrying a
stable ``code``.  The server maps codes to HTTP status codes; the message
is for logs only and never reaches the client.
"""

from typing import Any


class CarePlanError(ValueError):
    """Base class for all care plan engine errors."""

    code = "CARE_PLAN_ERROR"


class NotFoundError(CarePlanError):
    """The care plan item (or admission / care plan) does not exist."""

    code = "NOT_FOUND"


class InvalidCategoryError(CarePlanError):
    """The item exists but belongs to a different category than the wizard."""

    code = "INVALID_CATEGORY"


class AlreadyExistsError(CarePlanError):
    """A care plan already exists for the admission."""

    code = "ALREADY_EXISTS"


class InvalidInputError(CarePlanError):
    """Input failed schema validation.

    ``errors`` holds field-level messages as ``{"loc": [...], "msg": "..."}``.
    """

    code = "INVALID_INPUT"

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class PersistenceError(CarePlanError):
    """The store could not be read or written, or returned unusable data."""

    code = "PERSISTENCE_ERROR"
