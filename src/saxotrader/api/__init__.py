"""Typowana warstwa REST nad Saxo OpenAPI.

Rejestr endpointów, rzutowanie instrukcji na parametry, dispatcher
(request -> surowe bajty) oraz modele odpowiedzi do jawnego dekodowania.
"""

from .client import SaxoAPI
from .context import RequestContext
from .dispatcher import build_request, call, decode
from .endpoints import ENDPOINTS, Endpoint, resolve
from .instructions import Instruction, OrderDuration, OrderInstruction, make_order, project

__all__ = [
    "SaxoAPI",
    "RequestContext",
    "Endpoint",
    "ENDPOINTS",
    "resolve",
    "Instruction",
    "OrderDuration",
    "OrderInstruction",
    "make_order",
    "project",
    "build_request",
    "call",
    "decode",
]
