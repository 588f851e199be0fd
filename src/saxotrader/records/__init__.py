"""Wiązanie wierszy CSV (eksport transakcji brokera) z typowanymi rekordami."""

from .binder import EndOfInput, bind, iter_records, read_record
from .schema import Currency, FieldSpec, FieldType, RecordSchema, coerce, parse_bool

__all__ = [
    "Currency",
    "FieldType",
    "FieldSpec",
    "RecordSchema",
    "coerce",
    "parse_bool",
    "bind",
    "read_record",
    "iter_records",
    "EndOfInput",
]
