"""
Instrukcje (filtry zapytań i zlecenia) oraz ich rzutowanie na parametry query.

Broker odrzuca puste/nieznane parametry, więc `project` emituje tylko pola
z wartością różną od domyślnej.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from saxotrader.errors import MissingKey


class _Wire(BaseModel):
    """Atrybuty snake_case, nazwy na drucie PascalCase (jak w OpenAPI)."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)


class Instruction(_Wire):
    """Filtr zapytania: instrumenty, szczegóły, ceny."""

    exchange_id: str = ""
    keywords: str = ""
    asset_types: List[str] = Field(default_factory=list)
    asset_type: str = ""
    can_participate_in_multi_leg_order: bool = False
    trading_status: str = ""
    field_groups: List[str] = Field(default_factory=list)
    class_: List[str] = Field(default_factory=list, alias="Class")
    include_non_tradable: bool = False
    uics: List[int] = Field(default_factory=list)
    uic: int = 0
    underlying_uic: int = 0
    expiry_dates: str = ""
    option_space_segment: str = ""
    tags: List[str] = Field(default_factory=list)
    amount: float = 0.0
    amount_type: str = ""
    forward_date: str = ""
    forward_date_far_leg: str = ""
    forward_date_near_leg: str = ""
    lower_barrier: float = 0.0
    upper_barrier: float = 0.0
    order_bid_price: float = 0.0
    order_ask_price: float = 0.0
    put_call: str = ""
    strike_price: float = 0.0
    quote_currency: str = ""
    to_open_close: str = ""

    def to_params(self) -> Dict[str, str]:
        return project(self)


def _render(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:f}"  # bez notacji wykładniczej
    if isinstance(value, (list, tuple)):
        return ",".join(_render(v) for v in value)
    return str(value)


def project(instruction: Instruction) -> Dict[str, str]:
    """Spłaszcz instrukcję do {NazwaParametru: tekst}, pomijając pola puste/zerowe."""
    params: Dict[str, str] = {}
    for name, info in type(instruction).model_fields.items():
        if name == "uic":
            continue  # wchodzi do Uics
        value = getattr(instruction, name)
        if name == "uics":
            value = list(value)
            if instruction.uic and instruction.uic not in value:
                value.append(instruction.uic)
        if not value:
            continue
        params[info.alias or to_pascal(name)] = _render(value)
    return params


# --------------------------------------------------------------------------- zlecenia


class OrderDuration(_Wire):
    duration_type: str = "DayOrder"


class OrderInstruction(_Wire):
    """Body dla make_order / replace_order."""

    uic: int
    buy_sell: str
    asset_type: str
    amount: float
    order_price: Optional[float] = None
    order_type: str = "Limit"
    order_duration: OrderDuration = Field(default_factory=OrderDuration)
    manual_order: bool = True
    account_key: str
    order_id: Optional[str] = None


def make_order(
    amount: float,
    price: float,
    uic: int,
    asset_type: str,
    buy_sell: str,
    account_key: str,
    duration: str = "",
    order_type: str = "",
) -> OrderInstruction:
    """Zbuduj zlecenie; domyślnie Limit/DayOrder, wymaga AccountKey."""
    if not account_key:
        raise MissingKey("AccountKey")
    order_type = order_type or "Limit"
    return OrderInstruction(
        uic=uic,
        buy_sell=buy_sell,
        asset_type=asset_type,
        amount=amount,
        order_price=None if order_type == "Market" else price,
        order_type=order_type,
        order_duration=OrderDuration(duration_type=duration or "DayOrder"),
        account_key=account_key,
    )
