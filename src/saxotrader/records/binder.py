from __future__ import annotations

import csv
from typing import Any, Iterable, Iterator, Sequence, TextIO, Type, TypeVar

from saxotrader.errors import FieldCountMismatch
from saxotrader.records.schema import RecordSchema

R = TypeVar("R")


class EndOfInput(Exception):
    """Strumień wierszy się skończył. To nie jest błąd danych."""


def bind(row: Sequence[str], schema: RecordSchema) -> Any:
    """
    Zamień jeden wiersz (lista tokenów) na rekord typu `schema.record_type`.

    Albo zwraca kompletny rekord, albo rzuca pierwszy błąd pola bez zmian.
    Liczba tokenów musi się zgadzać ze schematem, inaczej nic nie konwertujemy.
    """
    if len(row) != len(schema.fields):
        raise FieldCountMismatch(expected=len(schema.fields), got=len(row))

    values = {spec.name: spec.coerce(token) for spec, token in zip(schema.fields, row)}
    return schema.record_type(**values)


def read_record(rows: Iterator[Sequence[str]], schema: RecordSchema) -> Any:
    """Pobierz następny wiersz z iteratora i zbinduj go; na końcu rzuca EndOfInput."""
    try:
        row = next(rows)
    except StopIteration:
        raise EndOfInput() from None
    return bind(row, schema)


def iter_records(
    stream: TextIO | Iterable[str],
    record_type: Type[R],
    *,
    skip_header: bool = True,
    delimiter: str = ",",
) -> Iterator[R]:
    """
    Iterator po rekordach z otwartego pliku CSV, w kolejności wierszy.

    Pierwsza linia (nagłówek) jest pomijana. Błędy wiązania lecą do wołającego;
    kto chce pomijać złe wiersze, używa `read_record` w pętli.
    """
    schema = RecordSchema.of(record_type)
    rows = csv.reader(stream, delimiter=delimiter)
    if skip_header:
        next(rows, None)
    while True:
        try:
            yield read_record(rows, schema)
        except EndOfInput:
            return
