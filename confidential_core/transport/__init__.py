# confidential_core/transport/__init__.py
import os
from confidential_core.constants import (
    DEFAULT_GATEWAY_URL, DEFAULT_KEY_PROVIDER, DEFAULT_RPC_TIMEOUT,
    ENV_GATEWAY_URL, ENV_KEY_PROVIDER, ENV_RPC_TIMEOUT,
)
from confidential_core.transport.transport_base import KeyProvider, PublicKeyResponse
from confidential_core.transport.transport_http import HTTPKeyProvider
from confidential_core.transport.transport_local import LocalKeyProvider


def provider_factory(config: dict | None = None) -> KeyProvider:
    """
    Select the remote key provider.

    config keys (falling back to the environment):
      - "provider" / $CONFIDENTIAL_KEY_PROVIDER : "http" (default) | "local"
      - "url"      / $CONFIDENTIAL_GATEWAY_URL
      - "timeout"  / $CONFIDENTIAL_RPC_TIMEOUT
      - "key"      : fixed key for the local provider
    """
    config = config or {}
    mode = (config.get("provider") or os.getenv(ENV_KEY_PROVIDER, DEFAULT_KEY_PROVIDER)).lower()

    if mode == "http":
        return HTTPKeyProvider(
            config.get("url") or os.getenv(ENV_GATEWAY_URL, DEFAULT_GATEWAY_URL),
            timeout=float(config.get("timeout") or os.getenv(ENV_RPC_TIMEOUT, DEFAULT_RPC_TIMEOUT)),
        )

    if mode == "local":
        if not config.get("key"):
            raise ValueError("local key provider needs a 'key'")
        return LocalKeyProvider(config["key"])

    raise ValueError(f"Unknown key provider: {mode}")


__all__ = [
    "KeyProvider",
    "PublicKeyResponse",
    "HTTPKeyProvider",
    "LocalKeyProvider",
    "provider_factory",
]
