"""
Dispatcher wywołań REST.

Przebieg jednego wywołania:
1. rozwiąż nazwę endpointu w rejestrze,
2. zserializuj `body_object` (nadpisuje `body`),
3. nagłówki: Bearer zawsze, Content-Type tylko przy niepustym body,
4. GET/DELETE: parametry + ClientKey/AccountKey z kontekstu do query; podstaw `{...}` w ścieżce,
5. wyślij synchronicznie; status spoza 2xx -> UpstreamRejected (bez ponawiania),
6. zwróć surowe bajty; dekodowanie to osobny, jawny krok (`decode`).
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from saxotrader.api.context import RequestContext
from saxotrader.api.endpoints import PLACEHOLDER_RX, Endpoint, resolve
from saxotrader.errors import (
    SerializationFailure,
    TransportFailure,
    UnresolvedPlaceholder,
    UpstreamRejected,
)
from saxotrader.utils.log import get_logger

log = get_logger(__name__)

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"


def serialize_body(ctx: RequestContext) -> bytes:
    """Jeśli jest `body_object`, to on jest źródłem prawdy; zapisujemy wynik w `ctx.body`."""
    if ctx.body_object is None:
        return ctx.body
    obj = ctx.body_object
    try:
        if isinstance(obj, BaseModel):
            raw = obj.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
        else:
            raw = json.dumps(obj).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationFailure(f"Cannot encode request body: {exc}") from exc
    ctx.body = raw
    log.debug("saxo.body", body=raw.decode("utf-8"))
    return raw


def _address_params(ctx: RequestContext) -> Dict[str, str]:
    params = dict(ctx.params)
    # jawnie podany parametr wygrywa z kluczem z kontekstu
    if ctx.client_key and "ClientKey" not in params:
        params["ClientKey"] = ctx.client_key
    if ctx.account_key and "AccountKey" not in params:
        params["AccountKey"] = ctx.account_key
    return params


def resolve_path(template: str, params: Dict[str, str]) -> str:
    """Podstaw `{Nazwa}` wartościami z `params` (jedno przejście od lewej)."""

    def _sub(m: re.Match) -> str:
        key = m.group(1)
        if key not in params:
            raise UnresolvedPlaceholder(key)
        return params[key]

    return PLACEHOLDER_RX.sub(_sub, template)


def build_request(ctx: RequestContext, name: str) -> httpx.Request:
    endpoint: Endpoint = resolve(name)
    body = serialize_body(ctx)

    headers = {"Authorization": f"Bearer {ctx.token}"}
    if body:
        headers["Content-Type"] = JSON_CONTENT_TYPE

    params = _address_params(ctx)
    path = resolve_path(endpoint.path, params)
    # stała kolejność w query: klucze alfabetycznie
    query = sorted(params.items()) if endpoint.sends_query else None

    return httpx.Request(
        endpoint.verb,
        ctx.base_url + path,
        params=query,
        headers=headers,
        content=body or None,
    )


def call(ctx: RequestContext, name: str, *, client: Optional[httpx.Client] = None) -> bytes:
    """Wykonaj wywołanie `name` i zwróć surowe body odpowiedzi 2xx."""
    request = build_request(ctx, name)
    log.debug("saxo.request", call=name, method=request.method, url=str(request.url))

    try:
        if client is None:
            with httpx.Client() as own:
                response = own.send(request)
        else:
            response = client.send(request)
    except httpx.RequestError as exc:
        raise TransportFailure(f"{request.method} {request.url}: {exc}") from exc

    if not response.is_success:
        log.warning(
            "saxo.rejected",
            call=name,
            status=response.status_code,
            body=response.text,
        )
        raise UpstreamRejected(response.status_code, response.reason_phrase, response.content)
    return response.content


def decode(payload: bytes, result_type: Type[T] | Any) -> T:
    """Zdekoduj JSON do zadeklarowanego typu (model pydantic, Page[...], list[...])."""
    try:
        return TypeAdapter(result_type).validate_json(payload)
    except ValidationError as exc:
        raise SerializationFailure(f"Cannot decode {result_type!r}: {exc}") from exc
