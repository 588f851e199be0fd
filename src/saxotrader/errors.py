from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from saxotrader.api.models import ErrorBody


class ErrorKind(str, Enum):
    """Zamknięta lista rodzajów błędów warstwy integracyjnej."""

    NOT_FOUND = "NotFound"
    SERIALIZATION_FAILURE = "SerializationFailure"
    TRANSPORT_FAILURE = "TransportFailure"
    UPSTREAM_REJECTED = "UpstreamRejected"
    UNRESOLVED_PLACEHOLDER = "UnresolvedPlaceholder"
    MISSING_KEY = "MissingKey"
    FIELD_COUNT_MISMATCH = "FieldCountMismatch"
    MALFORMED_NUMBER = "MalformedNumber"
    MALFORMED_DATE = "MalformedDate"
    UNRECOGNIZED_BOOLEAN = "UnrecognizedBoolean"
    MISSING_CURRENCY = "MissingCurrency"
    UNSUPPORTED_FIELD_TYPE = "UnsupportedFieldType"


class SaxoError(Exception):
    """Bazowy wyjątek dla projektu."""

    kind: ErrorKind


# --------------------------------------------------------------------- REST


class EndpointNotFound(SaxoError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown endpoint: {name!r}")


class SerializationFailure(SaxoError):
    """Nie udało się zakodować body albo zdekodować odpowiedzi."""

    kind = ErrorKind.SERIALIZATION_FAILURE

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class TransportFailure(SaxoError):
    """Błąd sieci (DNS, połączenie, timeout transportu)."""

    kind = ErrorKind.TRANSPORT_FAILURE

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class UpstreamRejected(SaxoError):
    """API odpowiedziało statusem innym niż 2xx; body trzymamy bez zmian."""

    kind = ErrorKind.UPSTREAM_REJECTED

    def __init__(self, status_code: int, reason: str, body: bytes) -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(
            f"Error: {status_code} {reason} {body.decode('utf-8', errors='replace')}"
        )

    @property
    def error(self) -> Optional[ErrorBody]:
        """Body błędu brokera (ErrorCode/Message/ModelState), jeśli to obiekt JSON."""
        from pydantic import ValidationError

        from saxotrader.api.models import ErrorBody

        try:
            return ErrorBody.model_validate_json(self.body)
        except ValidationError:
            return None


class UnresolvedPlaceholder(SaxoError):
    kind = ErrorKind.UNRESOLVED_PLACEHOLDER

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No parameter for path placeholder {{{name}}}")


class MissingKey(SaxoError):
    """Wywołanie wymaga ClientKey/AccountKey, którego kontekst nie ma."""

    kind = ErrorKind.MISSING_KEY

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"No {key} set")


# --------------------------------------------------------------------- CSV


class FieldCountMismatch(SaxoError):
    kind = ErrorKind.FIELD_COUNT_MISMATCH

    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(
            f"Mismatch in expected field length, expected {expected} got {got}"
        )


class FieldError(SaxoError):
    """Błąd konwersji pojedynczego pola; `field`/`position` wskazują kolumnę."""

    def __init__(
        self,
        message: str,
        token: str = "",
        field: Optional[str] = None,
        position: Optional[int] = None,
    ) -> None:
        self.token = token
        self._message = message
        super().__init__(message)
        self.at(field, position)

    def at(self, field: Optional[str], position: Optional[int]) -> "FieldError":
        self.field = field
        self.position = position
        if field is not None:
            self.args = (f"{self._message} (field {field!r} at position {position})",)
        return self


class MalformedNumber(FieldError):
    kind = ErrorKind.MALFORMED_NUMBER

    def __init__(self, token: str, field: Optional[str] = None, position: Optional[int] = None) -> None:
        super().__init__(f"Could not interpret {token!r} as a number", token, field, position)


class MalformedDate(FieldError):
    kind = ErrorKind.MALFORMED_DATE

    def __init__(self, token: str, field: Optional[str] = None, position: Optional[int] = None) -> None:
        super().__init__(f"Could not interpret {token!r} as a DD-MM-YYYY date", token, field, position)


class UnrecognizedBoolean(FieldError):
    kind = ErrorKind.UNRECOGNIZED_BOOLEAN

    def __init__(self, token: str, field: Optional[str] = None, position: Optional[int] = None) -> None:
        super().__init__(f"Could not interpret {token!r} as a bool", token, field, position)


class MissingCurrency(FieldError):
    kind = ErrorKind.MISSING_CURRENCY

    def __init__(self, token: str = "", field: Optional[str] = None, position: Optional[int] = None) -> None:
        super().__init__("Empty currency code", token, field, position)


class UnsupportedFieldType(SaxoError):
    """Błąd konfiguracji schematu, zgłaszany zanim przeczytamy pierwszy wiersz."""

    kind = ErrorKind.UNSUPPORTED_FIELD_TYPE

    def __init__(self, type_name: str, field: Optional[str] = None) -> None:
        self.type_name = type_name
        self.field = field
        where = f" for field {field!r}" if field else ""
        super().__init__(f"Unsupported type in record schema: {type_name}{where}")
