from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

import httpx

from saxotrader.api.context import RequestContext
from saxotrader.api.dispatcher import call, decode
from saxotrader.api.instructions import Instruction, OrderInstruction
from saxotrader.api.models import (
    Account,
    Balance,
    Client,
    InstrumentDetails,
    InstrumentSummary,
    NetPosition,
    Order,
    OrderResponse,
    Page,
    Position,
    Price,
    User,
)
from saxotrader.config import ApiSettings
from saxotrader.errors import MissingKey

T = TypeVar("T")

INSTRUMENTS_PAGE_SIZE = "1000"


class SaxoAPI:
    """
    Fasada nad dispatcherem: jedna metoda = jedno wywołanie OpenAPI.

    Każda metoda buduje świeży `RequestContext`, więc obiekt nie trzyma stanu
    per-wywołanie. Trzyma tylko token, klucze klienta/konta i (opcjonalnie)
    współdzielonego `httpx.Client`.
    """

    def __init__(
        self,
        token: str,
        base_url: Optional[str] = None,
        client_key: str = "",
        account_key: str = "",
        http: Optional[httpx.Client] = None,
    ) -> None:
        self.token = token
        self.base_url = base_url or ApiSettings().base_url
        self.client_key = client_key
        self.account_key = account_key
        self._http = http

    @classmethod
    def from_settings(cls, settings: ApiSettings, http: Optional[httpx.Client] = None) -> "SaxoAPI":
        if http is None and settings.timeout is not None:
            http = httpx.Client(timeout=settings.timeout)
        return cls(
            token=settings.token,
            base_url=settings.base_url,
            client_key=settings.client_key,
            account_key=settings.account_key,
            http=http,
        )

    # ---------- helpers ----------
    def context(self, params: Optional[Dict[str, str]] = None, body: Any = None) -> RequestContext:
        return RequestContext(
            token=self.token,
            base_url=self.base_url,
            client_key=self.client_key,
            account_key=self.account_key,
            params=dict(params or {}),
            body_object=body,
        )

    def request(self, name: str, result_type: Type[T] | Any, ctx: Optional[RequestContext] = None) -> T:
        payload = call(ctx or self.context(), name, client=self._http)
        return decode(payload, result_type)

    def _require_client_key(self) -> None:
        if not self.client_key:
            raise MissingKey("ClientKey")

    # ---------- konto ----------
    def user(self) -> User:
        return self.request("user", User)

    def client(self) -> Client:
        """Profil klienta; zapamiętuje ClientKey do kolejnych wywołań."""
        info = self.request("client", Client)
        self.client_key = info.client_key
        return info

    def accounts(self) -> List[Account]:
        return self.request("account", Page[Account]).data

    def default_account(self, client: Client, accounts: Sequence[Account]) -> Optional[Account]:
        for acct in accounts:
            if acct.account_key == client.default_account_key:
                return acct
        return None

    def balance(self, account_key: str = "") -> Balance:
        self._require_client_key()
        ctx = self.context()
        if account_key:
            ctx.account_key = account_key
        return self.request("balance", Balance, ctx)

    # ---------- instrumenty / ceny ----------
    def instruments(self, instr: Instruction) -> List[InstrumentSummary]:
        params = instr.to_params()
        params["$top"] = INSTRUMENTS_PAGE_SIZE
        return self.request("instruments", Page[InstrumentSummary], self.context(params)).data

    def instrument_details(self, instr: Instruction) -> List[InstrumentDetails]:
        return self.request("instrument_details", Page[InstrumentDetails], self.context(instr.to_params())).data

    def prices(self, instr: Instruction) -> List[Price]:
        return self.request("prices", Page[Price], self.context(instr.to_params())).data

    def quote(self, instr: Instruction) -> Price:
        return self.request("quotes", Price, self.context(instr.to_params()))

    # ---------- pozycje ----------
    def positions(self) -> List[Position]:
        self._require_client_key()
        return self.request("positions", Page[Position]).data

    def net_positions(self) -> List[NetPosition]:
        self._require_client_key()
        return self.request("net_positions", Page[NetPosition]).data

    # ---------- zlecenia ----------
    def order_list(self) -> List[Order]:
        self._require_client_key()
        return self.request("order_list", Page[Order]).data

    def order_details(self, order_id: str) -> Order:
        self._require_client_key()
        return self.request("order_details", Order, self.context({"OrderId": order_id}))

    def place_order(self, order: OrderInstruction) -> OrderResponse:
        self._require_client_key()
        return self.request("make_order", OrderResponse, self.context(body=order))

    def replace_order(self, order: OrderInstruction) -> OrderResponse:
        if not order.order_id:
            raise MissingKey("OrderId")
        return self.request("replace_order", OrderResponse, self.context(body=order))

    def cancel_orders(self, order_ids: Sequence[str], account_key: str = "") -> OrderResponse:
        if not order_ids:
            raise MissingKey("OrderIds")
        ctx = self.context({"OrderIds": ",".join(order_ids)})
        if account_key:
            ctx.account_key = account_key
        if not ctx.account_key:
            raise MissingKey("AccountKey")
        return self.request("cancel_order", OrderResponse, ctx)
