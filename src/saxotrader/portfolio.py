from __future__ import annotations

import csv
import dataclasses
from typing import Dict, Iterator, List, TextIO

import pandas as pd

from saxotrader.errors import FieldCountMismatch, FieldError
from saxotrader.records.binder import EndOfInput, read_record
from saxotrader.records.bookings import (
    Asset,
    BookingDetail,
    Derivative,
    Instrument,
    instrument_of,
    underlying_instrument_of,
)
from saxotrader.records.schema import RecordSchema
from saxotrader.utils.log import get_logger

log = get_logger(__name__)


class Portfolio:
    """
    Historia księgowań konta wczytana z eksportu CSV.

    - `bookings` posortowane po dacie (stabilnie, więc kolejność z pliku w obrębie dnia zostaje),
    - `instruments` to indeks po UIC; pierwszy widziany wiersz wygrywa,
    - `skipped_lines` to numery linii pliku z pominiętymi rekordami (ostatnia linia rekordu).
    """

    def __init__(self) -> None:
        self.bookings: List[BookingDetail] = []
        self.instruments: Dict[str, Instrument] = {}
        self.skipped_lines: List[int] = []

    def __len__(self) -> int:
        return len(self.bookings)

    @property
    def skipped(self) -> int:
        return len(self.skipped_lines)

    def __iter__(self) -> Iterator[BookingDetail]:
        return iter(self.bookings)

    def load_bookings(self, stream: TextIO, delimiter: str = ",", strict: bool = False) -> "Portfolio":
        """Wczytaj plik z nagłówkiem; złe wiersze logujemy i pomijamy (`strict` przerywa import)."""
        schema = RecordSchema.of(BookingDetail)
        rows = csv.reader(stream, delimiter=delimiter)
        next(rows, None)  # nagłówek

        while True:
            try:
                booking = read_record(rows, schema)
            except EndOfInput:
                break
            except (FieldCountMismatch, FieldError) as exc:
                if strict:
                    raise
                # fizyczna linia pliku (pole w cudzysłowie może mieć znak nowej linii)
                self.skipped_lines.append(rows.line_num)
                log.warning("bookings.row_skipped", line=rows.line_num, error=str(exc), kind=exc.kind.value)
                continue
            self.bookings.append(booking)

        self.bookings.sort(key=lambda b: b.date)
        for b in self.bookings:
            self.instruments.setdefault(b.uic, instrument_of(b))

        log.info(
            "bookings.loaded",
            count=len(self.bookings),
            skipped=self.skipped,
            instruments=len(self.instruments),
        )
        return self

    def asset_of(self, booking: BookingDetail) -> Asset:
        primary = self.instruments.get(booking.uic) or instrument_of(booking)
        underlying = underlying_instrument_of(booking)
        if underlying is None:
            return primary
        return Derivative(primary=primary, underlying=underlying)

    def to_frame(self) -> pd.DataFrame:
        """Księgowania jako DataFrame, jedna kolumna na pole rekordu."""
        columns = list(RecordSchema.of(BookingDetail).names)
        if not self.bookings:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame([dataclasses.asdict(b) for b in self.bookings], columns=columns)
