"""Status codes, kinds and verbs shared across subsystem boundaries."""

from enum import StrEnum


class ValidationErrorCode(StrEnum):
    """Reason recorded for a failed entry in a validation field list."""

    NOT_FOUND = "NOT_FOUND"
    NOT_VALID = "NOT_VALID"
    SYNTAX_ERROR = "SYNTAX_ERROR"


class Association(StrEnum):
    """Kind of relation an association field type describes.

    Values match the names used on the wire by existing backends.
    """

    BELONGS_TO = "BelongsTo"
    HAS_ONE = "HasOne"
    HAS_MANY = "HasMany"


class HttpMethod(StrEnum):
    """HTTP verbs issued by the fetch lifecycle."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"

    @property
    def sends_body(self) -> bool:
        """Whether requests with this verb carry a serialized payload."""
        return self is not HttpMethod.GET

    @property
    def operation(self) -> "OperationClass":
        """Lifecycle class whose flags track requests with this verb."""
        return OperationClass.FETCH if self is HttpMethod.GET else OperationClass.SAVE


class OperationClass(StrEnum):
    """Independent lifecycle tracks on a record: reads and writes."""

    FETCH = "fetch"
    SAVE = "save"
