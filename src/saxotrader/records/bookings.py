from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
from typing import Optional, Union

from saxotrader.records.schema import Currency


@dataclass(frozen=True)
class BookingDetail:
    """Jeden wiersz eksportu "Bookings" z platformy brokera (kolejność kolumn jak w pliku)."""

    date: dt.date
    account_id: str
    account_currency: Currency
    client_currency: Currency
    amount_type: str
    affects_balance: bool
    asset_type: str
    uic: str
    underlying_instrument_subtype: str
    instrument_symbol: str
    instrument_description: str
    instrument_subtype: str
    underlying_instrument_asset_type: str
    underlying_instrument_description: str
    underlying_instrument_symbol: str
    underlying_instrument_uic: str
    amount: float
    account_currency_amount: float
    client_currency_amount: float
    cost_type: str
    cost_subtype: str

    @property
    def has_underlying(self) -> bool:
        return bool(self.underlying_instrument_uic)


@dataclass(frozen=True)
class Instrument:
    type: str
    subtype: str
    symbol: str
    description: str
    asset_type: str
    uic: str


@dataclass(frozen=True)
class Derivative:
    primary: Instrument
    underlying: Instrument


# wariant: zwykły instrument albo pochodna (instrument + bazowy)
Asset = Union[Instrument, Derivative]


def primary_of(asset: Asset) -> Instrument:
    if isinstance(asset, Derivative):
        return asset.primary
    return asset


def underlying_of(asset: Asset) -> Optional[Instrument]:
    if isinstance(asset, Derivative):
        return asset.underlying
    return None


def instrument_of(b: BookingDetail) -> Instrument:
    return Instrument(
        type=b.asset_type,
        subtype=b.instrument_subtype,
        symbol=b.instrument_symbol,
        description=b.instrument_description,
        asset_type=b.asset_type,
        uic=b.uic,
    )


def underlying_instrument_of(b: BookingDetail) -> Optional[Instrument]:
    if not b.has_underlying:
        return None
    return Instrument(
        type=b.underlying_instrument_asset_type,
        subtype=b.underlying_instrument_subtype,
        symbol=b.underlying_instrument_symbol,
        description=b.underlying_instrument_description,
        asset_type=b.underlying_instrument_asset_type,
        uic=b.underlying_instrument_uic,
    )
