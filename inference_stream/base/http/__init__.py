"""HTTP client helpers for stream sessions."""

from .client import create_async_client, owned_client
from .request_spec import HttpRequestSpec, RequestFactory

__all__ = ["create_async_client", "owned_client", "HttpRequestSpec", "RequestFactory"]
