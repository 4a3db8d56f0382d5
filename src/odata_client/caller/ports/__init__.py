"""Endpoint caller ports."""

from odata_client.caller.ports.outbound import ConnectionFactoryPort, ConnectionPort, EndpointCaller

__all__ = ["ConnectionFactoryPort", "ConnectionPort", "EndpointCaller"]
