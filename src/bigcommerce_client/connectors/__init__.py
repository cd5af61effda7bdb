from .aiohttp_client import AiohttpTransport  # noqa: F401

__all__ = ["AiohttpTransport"]
