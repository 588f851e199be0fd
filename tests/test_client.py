from __future__ import annotations

import json

import httpx
import pytest

from saxotrader.api import Instruction, SaxoAPI, make_order
from saxotrader.config import ApiSettings
from saxotrader.errors import MissingKey

PREFIX = "/sim/openapi/"

FIXTURES = {
    "port/v1/users/me": {"Name": "Jan Kowalski", "UserId": "U1", "ClientKey": "CK1"},
    "port/v1/clients/me": {"ClientKey": "CK1", "DefaultAccountKey": "AK2", "DefaultCurrency": "EUR"},
    "port/v1/accounts/me": {"Data": [{"AccountKey": "AK1"}, {"AccountKey": "AK2", "Currency": "EUR"}]},
    "port/v1/balances": {"CashBalance": 1234.5, "Currency": "EUR", "InitialMargin": {"MarginAvailable": 10}},
    "ref/v1/instruments": {"Data": [{"Identifier": 21, "Symbol": "EURUSD", "AssetType": "FxSpot"}]},
    "ref/v1/instruments/details": {"Data": [{"Uic": 21, "TickSize": 0.00005, "Exchange": {"ExchangeId": "SBFX"}}]},
    "trade/v1/infoprices/list": {"Data": [{"Uic": 21, "Quote": {"Bid": 1.08, "Ask": 1.0802}}]},
    "port/v1/netpositions/me": {"Data": [{"NetPositionId": "21__FxSpot", "NetPositionBase": {"Amount": 1000}}]},
    "port/v1/positions/me": {"Data": [{"PositionId": "P1", "PositionBase": {"Uic": 21}}]},
    "port/v1/orders/me": {"Data": [{"OrderId": "O1", "BuySell": "Buy"}]},
    "port/v1/orders/CK1/O1/": {"OrderId": "O1", "Status": "Working"},
    "trade/v2/orders": {"OrderId": "O2"},
    "trade/v2/orders/": {"Orders": [{"OrderId": "O1"}, {"OrderId": "O3"}]},
}


class Recorder:
    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len(PREFIX):]
        if path not in FIXTURES:
            return httpx.Response(404, content=b'{"ErrorCode":"NotFound"}')
        return httpx.Response(200, content=json.dumps(FIXTURES[path]).encode())

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture()
def rec() -> Recorder:
    return Recorder()


@pytest.fixture()
def api(rec: Recorder) -> SaxoAPI:
    return SaxoAPI("T", http=httpx.Client(transport=httpx.MockTransport(rec)))


def test_user(api, rec):
    user = api.user()
    assert user.name == "Jan Kowalski"
    assert rec.last.headers["Authorization"] == "Bearer T"


def test_client_remembers_client_key(api, rec):
    assert api.client_key == ""
    info = api.client()
    assert info.default_account_key == "AK2"
    assert api.client_key == "CK1"

    api.user()
    assert rec.last.url.params["ClientKey"] == "CK1"


def test_accounts_and_default_account(api):
    client = api.client()
    accounts = api.accounts()
    assert [a.account_key for a in accounts] == ["AK1", "AK2"]
    assert api.default_account(client, accounts).currency == "EUR"


def test_balance_requires_client_key(api, rec):
    with pytest.raises(MissingKey):
        api.balance("AK2")
    assert rec.requests == []


def test_balance_for_account(api, rec):
    api.client()
    bal = api.balance("AK2")
    assert bal.cash_balance == 1234.5
    assert bal.initial_margin.margin_available == 10
    assert rec.last.url.params["AccountKey"] == "AK2"
    assert rec.last.url.params["ClientKey"] == "CK1"


def test_instruments_adds_page_size(api, rec):
    out = api.instruments(Instruction(keywords="EUR", asset_types=["FxSpot"]))
    assert out[0].identifier == 21
    params = rec.last.url.params
    assert params["$top"] == "1000"
    assert params["Keywords"] == "EUR"


def test_instrument_details_folds_uic(api, rec):
    out = api.instrument_details(Instruction(uic=21, asset_types=["FxSpot"]))
    assert out[0].exchange.exchange_id == "SBFX"
    assert rec.last.url.params["Uics"] == "21"
    assert "Uic" not in rec.last.url.params


def test_prices(api, rec):
    out = api.prices(Instruction(uics=[21], asset_type="FxSpot", amount=1000))
    assert out[0].quote.bid == 1.08
    assert rec.last.url.params["Amount"] == "1000.000000"
    assert rec.last.url.params["AssetType"] == "FxSpot"


def test_positions_need_client_key(api):
    with pytest.raises(MissingKey):
        api.net_positions()
    api.client()
    assert api.net_positions()[0].net_position_base.amount == 1000
    assert api.positions()[0].position_base.uic == 21


def test_order_list_and_details(api, rec):
    api.client()
    assert api.order_list()[0].order_id == "O1"
    detail = api.order_details("O1")
    assert detail.status == "Working"
    assert rec.last.url.path == PREFIX + "port/v1/orders/CK1/O1/"


def test_place_order_posts_json_body(api, rec):
    api.client()
    res = api.place_order(make_order(1000, 1.08, 21, "FxSpot", "Buy", account_key="AK2"))
    assert res.order_ids == ["O2"]
    req = rec.last
    assert req.method == "POST"
    assert json.loads(req.content)["AccountKey"] == "AK2"
    assert req.headers["Content-Type"] == "application/json"


def test_cancel_orders(api, rec):
    res = api.cancel_orders(["O1", "O3"], account_key="AK2")
    assert res.order_ids == ["O1", "O3"]
    assert rec.last.method == "DELETE"
    assert rec.last.url.params["OrderIds"] == "O1,O3"
    assert rec.last.url.params["AccountKey"] == "AK2"


def test_cancel_orders_requires_account_key(api):
    with pytest.raises(MissingKey):
        api.cancel_orders(["O1"])


def test_cancel_orders_requires_order_ids(api, rec):
    with pytest.raises(MissingKey) as exc:
        api.cancel_orders([], account_key="AK2")
    assert exc.value.key == "OrderIds"
    assert rec.requests == []


def test_replace_order_requires_order_id(api):
    order = make_order(1000, 1.08, 21, "FxSpot", "Buy", account_key="AK2")
    with pytest.raises(MissingKey):
        api.replace_order(order)


def test_from_settings():
    settings = ApiSettings(token="T", base_url="https://example.test/openapi", client_key="CK")
    api = SaxoAPI.from_settings(settings)
    assert api.base_url == "https://example.test/openapi/"
    assert api.client_key == "CK"
