"""
Typowane odpowiedzi OpenAPI (tylko do odczytu).

Atrybuty w snake_case, JSON w PascalCase. Nieznane pola ignorujemy, brakujące
dostają wartości domyślne (sim zwraca różne podzbiory pól).
"""

from __future__ import annotations

from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

T = TypeVar("T")


class SaxoModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        protected_namespaces=(),  # ErrorBody.model_state
    )


class Page(SaxoModel, Generic[T]):
    """Kolekcja stronicowana: lista pod `Data` (+ opcjonalnie __count/__next)."""

    data: List[T] = Field(default_factory=list)
    count: Optional[int] = Field(None, alias="__count")
    next: Optional[str] = Field(None, alias="__next")

    def __len__(self) -> int:
        return len(self.data)


class ErrorBody(SaxoModel):
    error_code: str = ""
    message: str = ""
    model_state: Dict[str, List[str]] = Field(default_factory=dict)


class TokenGrant(BaseModel):
    """Odpowiedź serwera OAuth2 (nazwy snake_case, jak w RFC 6749)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 0
    refresh_token: str = ""
    refresh_token_expires_in: int = 0


# --------------------------------------------------------------------------- konto


class User(SaxoModel):
    active: bool = False
    client_key: str = ""
    culture: str = ""
    language: str = ""
    last_login_time: str = ""
    last_login_status: str = ""
    legal_asset_types: List[str] = Field(default_factory=list)
    market_data_via_open_api_terms_accepted: bool = False
    name: str = ""
    timezone_id: int = 0
    user_id: str = ""
    user_key: str = ""


class Client(SaxoModel):
    account_value_protection_limit: float = 0.0
    allowed_netting_profiles: List[str] = Field(default_factory=list)
    allowed_trading_sessions: str = ""
    client_id: str = ""
    client_key: str = ""
    client_type: str = ""
    currency_decimals: int = 0
    default_account_key: str = ""
    default_account_id: str = ""
    default_currency: str = ""
    force_open_default_value: bool = False
    is_margin_trading_allowed: bool = False
    is_variation_margin_eligible: bool = False
    legal_asset_types: List[str] = Field(default_factory=list)
    legal_asset_types_are_indicative: bool = False
    margin_calculation_method: str = ""
    margin_monitoring_mode: str = ""
    name: str = ""
    partner_platform_id: str = ""
    position_netting_method: str = ""
    position_netting_mode: str = ""
    position_netting_profile: str = ""
    reduce_exposure_only: bool = False
    supports_account_value_protection_limit: bool = False


class Account(SaxoModel):
    account_id: str = ""
    account_key: str = ""
    account_group_key: str = ""
    account_name: str = ""
    account_type: str = ""
    account_sub_type: str = ""
    account_value_protection_limit: float = 0.0
    account_value_protection_limit_currency: str = ""
    active: bool = False
    can_use_cash_positions_as_margin_collateral: bool = False
    cfd_borrowing_costs_active: bool = False
    client_id: str = ""
    client_key: str = ""
    creation_date: str = ""
    currency: str = ""
    currency_decimals: int = 0
    direct_market_access: bool = False
    fractional_order_enabled: bool = False
    fractional_order_enabled_asset_types: List[str] = Field(default_factory=list)
    individual_margining: bool = False
    is_currency_conversion_at_settlement_time: bool = False
    is_margin_trading_allowed: bool = False
    is_shareable: bool = False
    is_trial_account: bool = False
    legal_asset_types: List[str] = Field(default_factory=list)
    management_type: str = ""
    margin_calculation_method: str = ""
    margin_lending_enabled: str = ""
    portfolio_based_margin_enabled: bool = False
    sharing: List[str] = Field(default_factory=list)
    supports_account_value_protection_limit: bool = False
    use_cash_positions_as_margin_collateral: bool = False


class CollateralCreditValue(SaxoModel):
    line: float = 0.0
    utilization_pct: float = 0.0


class InitialMargin(SaxoModel):
    collateral_available: float = 0.0
    collateral_credit_value: CollateralCreditValue = Field(default_factory=CollateralCreditValue)
    margin_available: float = 0.0
    margin_collateral_not_available: float = 0.0
    margin_used_by_current_positions: float = 0.0
    margin_utilization_pct: float = 0.0
    net_equity_for_margin: float = 0.0
    other_collateral_deduction: float = 0.0


class Balance(SaxoModel):
    calculation_reliability: str = ""
    cash_available_for_trading: float = 0.0
    cash_balance: float = 0.0
    cash_blocked: float = 0.0
    changes_scheduled: bool = False
    closed_positions_count: int = 0
    collateral_available: float = 0.0
    collateral_credit_value: CollateralCreditValue = Field(default_factory=CollateralCreditValue)
    corporate_action_unrealized_amounts: float = 0.0
    cost_to_close_positions: float = 0.0
    currency: str = ""
    currency_decimals: int = 0
    initial_margin: InitialMargin = Field(default_factory=InitialMargin)
    is_portfolio_margin_model_simple: bool = False
    margin_and_collateral_utilization_pct: float = 0.0
    margin_available_for_trading: float = 0.0
    margin_collateral_not_available: float = 0.0
    margin_exposure_coverage_pct: float = 0.0
    margin_net_exposure: float = 0.0
    margin_used_by_current_positions: float = 0.0
    margin_utilization_pct: float = 0.0
    net_equity_for_margin: float = 0.0
    net_positions_count: int = 0
    non_margin_positions_value: float = 0.0
    open_ipo_orders_count: int = 0
    open_positions_count: int = 0
    option_premiums_market_value: float = 0.0
    orders_count: int = 0
    other_collateral: float = 0.0
    settlement_value: float = 0.0
    spending_power_detail: Dict[str, str] = Field(default_factory=dict)
    total_value: float = 0.0
    transactions_not_booked: float = 0.0
    trigger_orders_count: int = 0
    unrealized_margin_closed_profit_loss: float = 0.0
    unrealized_margin_open_profit_loss: float = 0.0
    unrealized_margin_profit_loss: float = 0.0
    unrealized_positions_value: float = 0.0


# --------------------------------------------------------------------------- instrumenty


class DisplayAndFormat(SaxoModel):
    format: str = ""
    currency: str = ""
    decimals: int = 0
    description: str = ""
    order_decimals: int = 0
    symbol: str = ""


class InstrumentSummary(SaxoModel):
    """Element listy z ref/v1/instruments."""

    asset_type: str = ""
    currency_code: str = ""
    exchange_id: str = ""
    description: str = ""
    group_id: int = 0
    identifier: int = 0
    primary_listing: int = 0
    summary_type: str = ""
    issuer_country: str = ""
    symbol: str = ""
    tradable_as: List[str] = Field(default_factory=list)


class Exchange(SaxoModel):
    exchange_id: str = ""
    name: str = ""
    description: str = ""
    country_code: str = ""
    is_open: bool = False
    timezone_id: str = ""


class InstrumentFormat(SaxoModel):
    decimals: int = 0
    order_decimals: int = 0
    format: str = ""


class OrderDistances(SaxoModel):
    entry_default_distance: float = 0.0
    entry_default_distance_type: str = ""
    limit_default_distance: float = 0.0
    limit_default_distance_type: str = ""
    stop_limit_default_distance: float = 0.0
    stop_limit_default_distance_type: str = ""
    stop_loss_default_distance: float = 0.0
    stop_loss_default_distance_type: str = ""
    stop_loss_default_order_type: str = ""
    take_profit_default_distance: float = 0.0
    take_profit_default_distance_type: str = ""
    take_profit_default_order_type: str = ""


class InstrumentDetails(SaxoModel):
    asset_type: str = ""
    amount_decimals: int = 0
    currency_code: str = ""
    default_amount: float = 0.0
    default_slippage: float = 0.0
    default_slippage_type: str = ""
    description: str = ""
    exchange: Exchange = Field(default_factory=Exchange)
    format: InstrumentFormat = Field(default_factory=InstrumentFormat)
    fx_forward_max_forward_date: str = ""
    fx_forward_min_forward_date: str = ""
    group_id: int = 0
    increment_size: float = 0.0
    is_redemption_by_amounts: bool = False
    is_tradable: bool = False
    non_tradable_reason: str = ""
    order_distances: OrderDistances = Field(default_factory=OrderDistances)
    standard_amounts: List[float] = Field(default_factory=list)
    supported_order_types: List[str] = Field(default_factory=list)
    symbol: str = ""
    tick_size: float = 0.0
    tradable_as: List[str] = Field(default_factory=list)
    tradable_on: List[str] = Field(default_factory=list)
    trading_signals: str = ""
    trading_status: str = ""
    uic: int = 0


class Quote(SaxoModel):
    ask: float = 0.0
    ask_size: float = 0.0
    bid: float = 0.0
    bid_size: float = 0.0
    amount: float = 0.0
    delayed_by_minutes: float = 0.0
    error_code: str = ""
    market_state: str = ""
    mid: float = 0.0
    price_source: str = ""
    price_source_type: str = ""
    price_type_ask: str = ""
    price_type_bid: str = ""


class Price(SaxoModel):
    asset_type: str = ""
    last_updated: str = ""
    price_source: str = ""
    quote: Quote = Field(default_factory=Quote)
    display_and_format: DisplayAndFormat = Field(default_factory=DisplayAndFormat)
    uic: int = 0


# --------------------------------------------------------------------------- zlecenia / pozycje


class Duration(SaxoModel):
    duration_type: str = ""


class Order(SaxoModel):
    account_id: str = ""
    account_key: str = ""
    advice_note: str = ""
    amount: float = 0.0
    ask: float = 0.0
    asset_type: str = ""
    bid: float = 0.0
    buy_sell: str = ""
    calculation_reliability: str = ""
    client_id: str = ""
    client_key: str = ""
    client_name: str = ""
    client_note: str = ""
    correlation_key: str = ""
    current_price: float = 0.0
    current_price_delay_minutes: float = 0.0
    current_price_type: str = ""
    display_and_format: DisplayAndFormat = Field(default_factory=DisplayAndFormat)
    distance_to_market: float = 0.0
    duration: Duration = Field(default_factory=Duration)
    exchange: Exchange = Field(default_factory=Exchange)
    ipo_subscription_fee: float = 0.0
    is_extended_hours_enabled: bool = False
    is_force_open: bool = False
    is_market_open: bool = False
    market_price: float = 0.0
    market_state: str = ""
    market_value: float = 0.0
    non_tradable_reason: str = ""
    open_order_type: str = ""
    order_amount_type: str = ""
    order_id: str = ""
    order_relation: str = ""
    order_time: str = ""
    price: float = 0.0
    related_open_orders: List[str] = Field(default_factory=list)
    status: str = ""
    trading_status: str = ""
    uic: int = 0


class OrderResponse(SaxoModel):
    """Odpowiedź na złożenie/zmianę/anulowanie zlecenia."""

    order_id: str = ""
    orders: List["OrderResponse"] = Field(default_factory=list)

    @property
    def order_ids(self) -> List[str]:
        ids = [self.order_id] if self.order_id else []
        return ids + [o.order_id for o in self.orders if o.order_id]


class PositionBase(SaxoModel):
    amount: float = 0.0
    account_id: str = ""
    account_key: str = ""
    asset_type: str = ""
    can_be_closed: bool = False
    client_id: str = ""
    close_conversion_rate_settled: bool = False
    correlation_key: str = ""
    execution_open_time: str = ""
    is_force_open: bool = False
    is_market_open: bool = False
    locked_by_back_office: bool = False
    open_price: float = 0.0
    open_price_including_costs: float = 0.0
    related_open_orders: List[str] = Field(default_factory=list)
    source_order_id: str = ""
    spot_date: str = ""
    status: str = ""
    uic: int = 0
    value_date: str = ""


class PositionView(SaxoModel):
    ask: float = 0.0
    bid: float = 0.0
    calculation_reliability: str = ""
    conversion_rate_current: float = 0.0
    conversion_rate_open: float = 0.0
    current_price: float = 0.0
    current_price_delay_minutes: float = 0.0
    current_price_type_id: str = ""
    exposure: float = 0.0
    exposure_currency: str = ""
    exposure_in_base_currency: float = 0.0
    instrument_price_day_percent_change: float = 0.0
    market_state: str = ""
    market_value: float = 0.0
    market_value_in_base_currency: float = 0.0
    profit_loss_on_trade: float = 0.0
    profit_loss_on_trade_in_base_currency: float = 0.0
    trade_costs_total: float = 0.0
    trade_costs_total_in_base_currency: float = 0.0


class Position(SaxoModel):
    display_and_format: DisplayAndFormat = Field(default_factory=DisplayAndFormat)
    net_position_id: str = ""
    position_base: PositionBase = Field(default_factory=PositionBase)
    position_id: str = ""
    position_view: PositionView = Field(default_factory=PositionView)


class NetPositionBase(SaxoModel):
    amount: float = 0.0
    account_id: str = ""
    account_key: str = ""
    asset_type: str = ""
    can_be_closed: bool = False
    client_id: str = ""
    close_conversion_rate_settled: bool = False
    correlation_key: str = ""
    has_force_open_positions: bool = False
    is_market_open: bool = False
    non_tradable_reason: str = ""
    number_of_related_orders: int = 0
    opening_direction: str = ""
    open_ipo_orders_count: int = 0
    open_orders_count: int = 0
    open_trigger_orders_count: int = 0
    positions_account: str = ""
    single_position_status: str = ""
    uic: int = 0
    value_date: str = ""


class NetPositionView(SaxoModel):
    average_open_price: float = 0.0
    average_open_price_including_costs: float = 0.0
    calculation_reliability: str = ""
    current_price: float = 0.0
    current_price_delay_minutes: float = 0.0
    current_price_type: str = ""
    exposure: float = 0.0
    exposure_in_base_currency: float = 0.0
    instrument_price_day_percent_change: float = 0.0
    position_count: int = 0
    positions_not_closed_count: int = 0
    profit_loss_on_trade: float = 0.0
    status: str = ""
    trade_costs_total: float = 0.0
    trade_costs_total_in_base_currency: float = 0.0


class NetPosition(SaxoModel):
    display_and_format: DisplayAndFormat = Field(default_factory=DisplayAndFormat)
    net_position_id: str = ""
    net_position_base: NetPositionBase = Field(default_factory=NetPositionBase)
    net_position_view: NetPositionView = Field(default_factory=NetPositionView)
