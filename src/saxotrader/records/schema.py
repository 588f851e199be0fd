"""
Schemat rekordu tabelarycznego i konwersja pojedynczych pól.

Schemat budujemy raz na typ rekordu (frozen dataclass): każde pole dostaje
`FieldType` z jawnej tabeli typów Pythona. Nieznany typ to błąd konfiguracji,
zgłaszany przy budowie schematu, a nie przy n-tym wierszu.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from functools import lru_cache
from typing import Any, Final, NewType, Tuple, get_type_hints

from saxotrader.errors import (
    FieldError,
    MalformedDate,
    MalformedNumber,
    MissingCurrency,
    UnrecognizedBoolean,
    UnsupportedFieldType,
)

# Kod waluty (ISO), trzymany jako tekst
Currency = NewType("Currency", str)

DATE_FORMAT: Final[str] = "%d-%m-%Y"  # DD-MM-YYYY, jak w eksporcie brokera

# bez spacji, podkreśleń i cyfr spoza ASCII, które akceptuje int()/float()
_INT_RX: Final = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RX: Final = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:inf|infinity)|nan",
    re.IGNORECASE,
)
# strptime przyjmuje też "1-2-2023"; eksport zawsze ma zera wiodące
_DATE_RX: Final = re.compile(r"[0-9]{2}-[0-9]{2}-[0-9]{4}")

# eksport używa "Yes"/"No", nie "true"/"false"
_BOOL_WORDS: Final[dict[str, bool]] = {
    "yes": True,
    "true": True,
    "no": False,
    "false": False,
}


class FieldType(str, Enum):
    TEXT = "text"
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    CURRENCY = "currency"
    DATE = "date"


_PY_TYPES: Final[dict[Any, FieldType]] = {
    str: FieldType.TEXT,
    int: FieldType.INTEGER,
    float: FieldType.DECIMAL,
    bool: FieldType.BOOLEAN,
    Currency: FieldType.CURRENCY,
    date: FieldType.DATE,
}


def parse_bool(token: str) -> bool:
    """'Yes'/'No'/'true'/'false' w dowolnej wielkości liter."""
    try:
        return _BOOL_WORDS[token.lower()]
    except KeyError:
        raise UnrecognizedBoolean(token) from None


def parse_date(token: str) -> date:
    if not _DATE_RX.fullmatch(token):
        raise MalformedDate(token)
    try:
        return datetime.strptime(token, DATE_FORMAT).date()
    except ValueError:
        raise MalformedDate(token) from None


def coerce(token: str, field_type: FieldType) -> Any:
    """Zamień tekst na wartość zgodną z `field_type` albo rzuć błąd pola."""
    if field_type is FieldType.TEXT:
        return token
    if field_type is FieldType.INTEGER:
        if not _INT_RX.fullmatch(token):
            raise MalformedNumber(token)
        return int(token, 10)
    if field_type is FieldType.DECIMAL:
        if not _DECIMAL_RX.fullmatch(token):
            raise MalformedNumber(token)
        return float(token)
    if field_type is FieldType.BOOLEAN:
        return parse_bool(token)
    if field_type is FieldType.CURRENCY:
        if not token:
            raise MissingCurrency(token)
        return Currency(token)
    if field_type is FieldType.DATE:
        return parse_date(token)
    raise UnsupportedFieldType(str(field_type))


@dataclass(frozen=True)
class FieldSpec:
    name: str
    position: int
    field_type: FieldType

    def coerce(self, token: str) -> Any:
        try:
            return coerce(token, self.field_type)
        except FieldError as exc:
            # ten sam wyjątek, tylko z informacją o kolumnie
            exc.at(self.name, self.position)
            raise


@dataclass(frozen=True)
class RecordSchema:
    """Uporządkowana lista pól docelowego typu rekordu."""

    record_type: type
    fields: Tuple[FieldSpec, ...]

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @classmethod
    def of(cls, record_type: type) -> "RecordSchema":
        return _schema_for(record_type)


@lru_cache(maxsize=None)
def _schema_for(record_type: type) -> RecordSchema:
    if not dataclasses.is_dataclass(record_type):
        raise UnsupportedFieldType(getattr(record_type, "__name__", repr(record_type)))

    hints = get_type_hints(record_type)
    specs = []
    for pos, f in enumerate(dataclasses.fields(record_type)):
        py_type = hints.get(f.name, f.type)
        ft = _PY_TYPES.get(py_type)
        if ft is None:
            type_name = getattr(py_type, "__name__", None) or str(py_type)
            raise UnsupportedFieldType(type_name, field=f.name)
        specs.append(FieldSpec(name=f.name, position=pos, field_type=ft))
    return RecordSchema(record_type=record_type, fields=tuple(specs))
