"""Exceptions raised by the confidential key manager."""

from typing import Any


class KeyManagerError(Exception):
    """Base exception for confidential_core."""


class InvalidEncoding(KeyManagerError, ValueError):
    """Hex string or key material is malformed."""


class FrameTooShort(KeyManagerError):
    """Encrypted frame is shorter than nonce + public key + tag."""

    def __init__(self, length: int, minimum: int):
        self.length = length
        self.minimum = minimum
        super().__init__(f"frame is {length} bytes, need at least {minimum}")


class AuthenticationFailure(KeyManagerError):
    """Ciphertext did not verify (tampered frame or wrong key)."""


class TransportError(KeyManagerError):
    pass


class RemoteFetchError(TransportError):
    """The remote key provider failed to return a usable key."""

    def __init__(self, message: str, code: int = -32000, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data
