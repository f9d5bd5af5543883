"""HTTP adapter – the Transport port and its httpx implementations."""
from rental_query.adapters.http.client import HttpxTransport
from rental_query.adapters.http.envelope import Transport, TransportResponse
from rental_query.adapters.http.retry_client import RetryingHttpxTransport

__all__ = ["HttpxTransport", "RetryingHttpxTransport", "Transport", "TransportResponse"]
