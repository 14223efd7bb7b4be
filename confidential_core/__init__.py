"""
Confidential Core Package
=========================
Client-side key management for confidential smart-contract calls.

Provides:
- KeyManager: caches contract long-term / short-term keys and fetches
  short-term keys from a key provider (JSON-RPC gateway or local)
- Wire framing: nonce || sender public key || ciphertext, 0x-hex encoded
- X25519 / HKDF / AES-GCM box primitive and the client identity keypair
"""

from .codec import CryptoCodec
from .crypto import IdentityKeypair, box_open, box_seal
from .errors import (
    AuthenticationFailure,
    FrameTooShort,
    InvalidEncoding,
    KeyManagerError,
    RemoteFetchError,
    TransportError,
)
from .fetcher import KeyFetcher
from .keymanager import KeyManager
from .storage import KeyEntry, KeyStore
from .transport import HTTPKeyProvider, KeyProvider, LocalKeyProvider, PublicKeyResponse, provider_factory
from .utils import canonical_address, from_hex, to_hex

__version__ = "0.1.0"

__all__ = [
    "KeyManager",
    "KeyFetcher",
    "KeyStore",
    "KeyEntry",
    "CryptoCodec",
    "IdentityKeypair",
    "box_seal",
    "box_open",
    "KeyProvider",
    "PublicKeyResponse",
    "HTTPKeyProvider",
    "LocalKeyProvider",
    "provider_factory",
    "KeyManagerError",
    "InvalidEncoding",
    "FrameTooShort",
    "AuthenticationFailure",
    "RemoteFetchError",
    "TransportError",
    "to_hex",
    "from_hex",
    "canonical_address",
]
