from __future__ import annotations

import json

import httpx
import pytest

from saxotrader.api.context import RequestContext
from saxotrader.api.dispatcher import build_request, call, decode, resolve_path
from saxotrader.api.instructions import Instruction, OrderInstruction, project
from saxotrader.api.models import Account, Page, User
from saxotrader.errors import (
    EndpointNotFound,
    ErrorKind,
    SerializationFailure,
    TransportFailure,
    UnresolvedPlaceholder,
    UpstreamRejected,
)

BASE = "https://gateway.saxobank.com/sim/openapi/"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------#
#  Budowa requestu                                                           #
# ---------------------------------------------------------------------------#
def test_instruments_request_end_to_end():
    params = project(Instruction(asset_types=["FxSpot"], keywords="EUR"))
    ctx = RequestContext(token="T", params=params)

    req = build_request(ctx, "instruments")

    assert req.method == "GET"
    assert req.headers["Authorization"] == "Bearer T"
    assert str(req.url) == BASE + "ref/v1/instruments?AssetTypes=FxSpot&Keywords=EUR"
    assert req.content == b""
    assert "content-type" not in req.headers


def test_path_template_substitution():
    path = resolve_path("port/v1/orders/{ClientKey}/{OrderId}/", {"ClientKey": "C1", "OrderId": "O9"})
    assert path == "port/v1/orders/C1/O9/"


def test_repeated_placeholder_substituted_everywhere():
    assert resolve_path("a/{X}/b/{X}", {"X": "1"}) == "a/1/b/1"


def test_order_details_uses_context_client_key():
    ctx = RequestContext(token="T", client_key="C1", params={"OrderId": "O9"})
    req = build_request(ctx, "order_details")
    assert req.url.path.endswith("/port/v1/orders/C1/O9/")


def test_missing_placeholder_value():
    ctx = RequestContext(token="T", params={"OrderId": "O9"})
    with pytest.raises(UnresolvedPlaceholder) as exc:
        build_request(ctx, "order_details")
    assert exc.value.name == "ClientKey"


def test_client_key_injected_once():
    ctx = RequestContext(token="T", client_key="CK1")
    req = build_request(ctx, "user")
    assert req.url.params.get_list("ClientKey") == ["CK1"]


def test_explicit_client_key_wins():
    ctx = RequestContext(token="T", client_key="CK1", params={"ClientKey": "EXPLICIT"})
    req = build_request(ctx, "order_list")
    assert req.url.params.get_list("ClientKey") == ["EXPLICIT"]


def test_account_key_injected_for_delete():
    ctx = RequestContext(token="T", account_key="AK", params={"OrderIds": "1,2"})
    req = build_request(ctx, "cancel_order")
    assert req.method == "DELETE"
    assert req.url.path.endswith("/trade/v2/orders/")
    assert req.url.params["AccountKey"] == "AK"
    assert req.url.params["OrderIds"] == "1,2"


def test_empty_keys_not_injected():
    req = build_request(RequestContext(token="T"), "user")
    assert "ClientKey" not in req.url.params
    assert "AccountKey" not in req.url.params


def test_query_keys_sorted_with_injected_key():
    params = project(Instruction(keywords="EUR", uic=21, asset_types=["FxSpot"]))
    ctx = RequestContext(token="T", client_key="CK", params=params)

    req = build_request(ctx, "instruments")

    assert req.url.query == b"AssetTypes=FxSpot&ClientKey=CK&Keywords=EUR&Uics=21"


def test_body_object_overrides_raw_body():
    order = OrderInstruction(uic=21, buy_sell="Buy", asset_type="FxSpot", amount=1000, order_price=1.1, account_key="AK")
    ctx = RequestContext(token="T", client_key="CK", body=b"junk", body_object=order)

    req = build_request(ctx, "make_order")

    assert req.method == "POST"
    assert req.headers["Content-Type"] == "application/json"
    assert ctx.body == req.content
    body = json.loads(req.content)
    assert body["Uic"] == 21
    assert body["OrderDuration"] == {"DurationType": "DayOrder"}
    assert "OrderId" not in body
    # POST nie dostaje parametrów w query
    assert req.url.query == b""


def test_plain_dict_body_object():
    ctx = RequestContext(token="T", body_object={"OrderId": "1"})
    req = build_request(ctx, "replace_order")
    assert json.loads(req.content) == {"OrderId": "1"}


def test_raw_body_sets_content_type():
    ctx = RequestContext(token="T", body=b'{"a":1}')
    req = build_request(ctx, "replace_order")
    assert req.headers["Content-Type"] == "application/json"
    assert req.content == b'{"a":1}'


def test_unserializable_body():
    ctx = RequestContext(token="T", body_object={"when": object()})
    with pytest.raises(SerializationFailure):
        build_request(ctx, "make_order")


def test_unknown_call_name():
    with pytest.raises(EndpointNotFound):
        build_request(RequestContext(token="T"), "bogus")


# ---------------------------------------------------------------------------#
#  Wykonanie                                                                 #
# ---------------------------------------------------------------------------#
def test_call_returns_raw_payload():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b'{"Name":"Jan","UserId":"U1"}')

    with _client(handler) as http:
        payload = call(RequestContext(token="T"), "user", client=http)

    assert payload == b'{"Name":"Jan","UserId":"U1"}'
    assert len(seen) == 1
    assert seen[0].url.path == "/sim/openapi/port/v1/users/me"


def test_upstream_rejection_keeps_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, content=b'{"ErrorCode":"X"}')

    with _client(handler) as http, pytest.raises(UpstreamRejected) as exc:
        call(RequestContext(token="T"), "user", client=http)

    err = exc.value
    assert err.kind is ErrorKind.UPSTREAM_REJECTED
    assert err.status_code == 404
    assert err.body == b'{"ErrorCode":"X"}'
    assert err.error.error_code == "X"
    assert err.error.message == ""
    assert "404" in str(err)


def test_non_json_rejection_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, content=b"maintenance")

    with _client(handler) as http, pytest.raises(UpstreamRejected) as exc:
        call(RequestContext(token="T"), "user", client=http)
    assert exc.value.body == b"maintenance"
    assert exc.value.error is None


def test_rejection_error_body_with_model_state():
    body = b'{"ErrorCode":"InvalidModelState","Message":"Bad","ModelState":{"Amount":["must be > 0"]}}'
    err = UpstreamRejected(400, "Bad Request", body)
    assert err.error.error_code == "InvalidModelState"
    assert err.error.message == "Bad"
    assert err.error.model_state == {"Amount": ["must be > 0"]}
    # JSON, ale nie obiekt
    assert UpstreamRejected(400, "Bad Request", b"[1]").error is None


def test_no_retry_on_rejection():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(500)

    with _client(handler) as http, pytest.raises(UpstreamRejected):
        call(RequestContext(token="T"), "user", client=http)
    assert len(calls) == 1


def test_transport_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as http, pytest.raises(TransportFailure) as exc:
        call(RequestContext(token="T"), "user", client=http)
    assert exc.value.kind is ErrorKind.TRANSPORT_FAILURE


def test_created_status_is_success():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, content=b'{"OrderId":"7"}')

    with _client(handler) as http:
        assert call(RequestContext(token="T", body_object={"a": 1}), "make_order", client=http) == b'{"OrderId":"7"}'


# ---------------------------------------------------------------------------#
#  Dekodowanie                                                               #
# ---------------------------------------------------------------------------#
def test_decode_typed_result():
    user = decode(b'{"Name":"Jan","UserId":"U1","LegalAssetTypes":["Stock"],"Unknown":1}', User)
    assert user.name == "Jan"
    assert user.legal_asset_types == ["Stock"]


def test_decode_paged_collection():
    page = decode(b'{"__count":1,"Data":[{"AccountKey":"AK","Currency":"EUR"}]}', Page[Account])
    assert len(page) == 1
    assert page.count == 1
    assert page.data[0].account_key == "AK"


@pytest.mark.parametrize("payload", [b"", b"not json", b'{"Data": 5}'])
def test_decode_failure(payload):
    with pytest.raises(SerializationFailure):
        decode(payload, Page[Account])
