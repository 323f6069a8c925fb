"""Request building, transports and the fetch lifecycle."""

from modelize.client.fetch import perform
from modelize.client.request import RequestOptions, WireRequest, build_headers, build_request_url
from modelize.client.transport import HttpxResponse, HttpxTransport, Transport, TransportResponse

__all__ = [
    "HttpxResponse",
    "HttpxTransport",
    "RequestOptions",
    "Transport",
    "TransportResponse",
    "WireRequest",
    "build_headers",
    "build_request_url",
    "perform",
]
