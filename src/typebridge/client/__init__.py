"""Typesense client façade.

Quick start::

    from typebridge.client import TypesenseClient
    from typebridge.config import ConnectionConfig

    client = TypesenseClient(ConnectionConfig(host="localhost", api_key="xyz"))
    print(client.retrieve_health())
"""

from typebridge.client.client import Keys, TypesenseClient
from typebridge.client.coercion import FieldType, prepare_item_value, prepare_item_values
from typebridge.client.registry import ServerNotFoundError, ServerRegistry, ServerUnavailableError

__all__ = [
    "FieldType",
    "Keys",
    "ServerNotFoundError",
    "ServerRegistry",
    "ServerUnavailableError",
    "TypesenseClient",
    "prepare_item_value",
    "prepare_item_values",
]
