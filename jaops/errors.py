# Exception Handlers
#
# Every failure a processor may raise is one of the kinds in ErrorKind.
# The pipeline classifies raised exceptions by that tag and serializes them, for example:
# {
#     "errors": [
#         {"status": 404, "code": "not_found"}
#     ]
# }
#
# The application loglevel determines the level of detail shown to the user.
# If set to debug, too much sensitive info might be shown !
#
from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, Optional
from sqlalchemy.exc import DontWrapMixin
import jaops
from .config import is_debug
from .jsonapi_types import JSONAPIErrorsDocument

HIDDEN_LOG = "(debug logging disabled)"


class ErrorKind(str, Enum):
    UNHANDLED = "unhandled_error"
    ACCESS_DENIED = "access_denied"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    INVALID_PAYLOAD = "invalid_payload"


class JsonapiError(Exception, DontWrapMixin):
    """
    Base class of the structured JSON:API errors
    """

    kind = ErrorKind.UNHANDLED
    status = HTTPStatus.INTERNAL_SERVER_ERROR.value
    detail: Optional[str] = None

    def __init__(self, detail: Optional[str] = None) -> None:
        """
        :param detail: human-readable explanation, only sent to the client in debug mode
        """
        Exception.__init__(self, detail or self.kind.value)
        if detail and is_debug():
            self.detail = detail

    @property
    def code(self) -> str:
        return self.kind.value

    def to_dict(self) -> Dict[str, Any]:
        """
        :return: the JSON:API error object
        """
        result: Dict[str, Any] = {"status": self.status, "code": self.code}
        if self.detail is not None:
            result["detail"] = self.detail
        return result


class UnhandledError(JsonapiError):
    """
    Catch-all for failures that aren't structured JSON:API errors
    """

    kind = ErrorKind.UNHANDLED
    status = HTTPStatus.INTERNAL_SERVER_ERROR.value  # 500


class AccessDenied(JsonapiError):
    """
    This exception is raised when the current identity may not perform an operation
    """

    kind = ErrorKind.ACCESS_DENIED
    status = HTTPStatus.FORBIDDEN.value

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail)
        jaops.log.error("AccessDenied: %s", detail or HIDDEN_LOG)


class Unauthorized(JsonapiError):
    """
    This exception is raised when no (valid) identity was provided
    """

    kind = ErrorKind.UNAUTHORIZED
    status = HTTPStatus.UNAUTHORIZED.value

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail)
        jaops.log.error("Unauthorized: %s", detail or HIDDEN_LOG)


class NotFoundError(JsonapiError):
    """
    This exception is raised when an item was not found
    """

    kind = ErrorKind.NOT_FOUND
    status = HTTPStatus.NOT_FOUND.value

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail)
        jaops.log.error("Not found: %s", detail or HIDDEN_LOG)


class InvalidPayload(JsonapiError):
    """
    This exception is raised when invalid input has been detected (client side input)
    Always send back the detail to the client in the response
    """

    kind = ErrorKind.INVALID_PAYLOAD
    status = HTTPStatus.BAD_REQUEST.value

    def __init__(self, detail: str = "") -> None:
        Exception.__init__(self, detail)
        self.detail = detail
        jaops.log.warning("InvalidPayload: %s", detail)


class jsonapi_errors:
    """
    Constructors for the error kinds, named after the wire codes they produce
    """

    UnhandledError = UnhandledError
    AccessDenied = AccessDenied
    Unauthorized = Unauthorized
    RecordNotExists = NotFoundError

    @staticmethod
    def InvalidPayload(detail: str) -> InvalidPayload:
        return InvalidPayload(detail)


def as_jsonapi_error(exc: BaseException) -> JsonapiError:
    """
    :param exc: exception raised while handling an operation
    :return: the structured error that will be serialized

    Structured errors are passed through, anything else is logged and hidden
    behind a generic unhandled_error
    """
    if isinstance(exc, JsonapiError):
        return exc
    jaops.log.error("Unhandled error: %r", exc, exc_info=(type(exc), exc, exc.__traceback__))
    return UnhandledError()


def errors_document(error: JsonapiError) -> JSONAPIErrorsDocument:
    return {"errors": [error.to_dict()]}
