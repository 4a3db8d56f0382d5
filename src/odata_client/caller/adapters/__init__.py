"""Endpoint caller adapters."""

from odata_client.caller.adapters.httpx_connection import ConnectionFactory, HttpxConnection, ResponseStream

__all__ = ["ConnectionFactory", "HttpxConnection", "ResponseStream"]
