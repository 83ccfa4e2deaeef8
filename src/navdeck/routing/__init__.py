"""Routing — client-side path router with an ordered route table.

Routes are registered before ``init()``. Each navigation event resolves
the current path by exact lookup first, then by anchored regular
expression in registration order.
"""

from navdeck.routing.links import is_in_app_link
from navdeck.routing.router import Router
from navdeck.routing.table import RouteHandler, RouteState, RouteTable

__all__ = ["RouteHandler", "RouteState", "RouteTable", "Router", "is_in_app_link"]
