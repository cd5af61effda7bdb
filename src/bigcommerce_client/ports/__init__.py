"""Ports for the request pipeline."""

from .http import IHttpTransport, RawResponse  # noqa: F401

__all__ = [
    "IHttpTransport",
    "RawResponse",
]
