"""
confidential_core.crypto
------------------------
Public-key authenticated encryption ("box") used to seal messages between
a client identity and a contract key:

- X25519: key agreement between sender secret and recipient public key
- HKDF-SHA256: box key bound to both public keys
- AES-256-GCM: 16-byte nonce, 16-byte tag appended to the ciphertext

Plus the client's IdentityKeypair.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.asymmetric import x25519
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from .constants import BOX_INFO, NONCE_SIZE, PUBLIC_KEY_SIZE
from .errors import AuthenticationFailure, InvalidEncoding
from .utils import to_hex


# --------- X25519 keys ----------
def x25519_generate() -> tuple[bytes, bytes]:
    sk = x25519.X25519PrivateKey.generate()
    pk = sk.public_key()
    return sk.private_bytes_raw(), pk.public_bytes_raw()


def x25519_public_from_secret(secret: bytes) -> bytes:
    return _load_secret(secret).public_key().public_bytes_raw()


def _load_secret(secret: bytes) -> x25519.X25519PrivateKey:
    if len(secret) != PUBLIC_KEY_SIZE:
        raise InvalidEncoding(f"secret key must be {PUBLIC_KEY_SIZE} bytes, got {len(secret)}")
    return x25519.X25519PrivateKey.from_private_bytes(secret)


def _load_public(public: bytes) -> x25519.X25519PublicKey:
    if len(public) != PUBLIC_KEY_SIZE:
        raise InvalidEncoding(f"public key must be {PUBLIC_KEY_SIZE} bytes, got {len(public)}")
    return x25519.X25519PublicKey.from_public_bytes(public)


def derive_box_key(secret: bytes, peer_public: bytes, sender_public: bytes, recipient_public: bytes) -> bytes:
    """
    Derive the symmetric box key shared by sender and recipient.

    Both public keys go into the HKDF info so every bit of the framed
    sender key is authenticated, including the bit X25519 ignores.
    """
    sk = _load_secret(secret)
    shared = sk.exchange(_load_public(peer_public))
    hkdf = HKDF(algorithm=hashes.SHA256(), length=32, salt=None,
                info=BOX_INFO + sender_public + recipient_public)
    return hkdf.derive(shared)


# --------- Seal / Open ----------
def box_seal(nonce: bytes, plaintext: bytes, aad: bytes, recipient_public: bytes, sender_secret: bytes) -> bytes:
    if len(nonce) != NONCE_SIZE:
        raise InvalidEncoding(f"nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")
    sender_public = x25519_public_from_secret(sender_secret)
    try:
        key = derive_box_key(sender_secret, recipient_public, sender_public, recipient_public)
    except ValueError as e:
        # low-order recipient key; unusable as an encryption target
        if isinstance(e, InvalidEncoding):
            raise
        raise InvalidEncoding(f"unusable recipient public key: {e}") from e
    return AESGCM(key).encrypt(nonce, plaintext, aad or None)


def box_open(nonce: bytes, ciphertext: bytes, aad: bytes, sender_public: bytes, recipient_secret: bytes) -> bytes:
    if len(nonce) != NONCE_SIZE:
        raise InvalidEncoding(f"nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")
    recipient_public = x25519_public_from_secret(recipient_secret)
    try:
        key = derive_box_key(recipient_secret, sender_public, sender_public, recipient_public)
    except ValueError as e:
        # low-order sender key yields an all-zero shared secret
        if isinstance(e, InvalidEncoding):
            raise
        raise AuthenticationFailure(f"key agreement failed: {e}") from e
    try:
        return AESGCM(key).decrypt(nonce, ciphertext, aad or None)
    except InvalidTag as e:
        raise AuthenticationFailure("ciphertext failed authentication") from e


# --------- Identity ----------
@dataclass(frozen=True)
class IdentityKeypair:
    """The client's X25519 identity. Held in memory only."""
    public_key: bytes
    secret_key: bytes = field(repr=False)

    @classmethod
    def generate(cls) -> "IdentityKeypair":
        sk, pk = x25519_generate()
        return cls(public_key=pk, secret_key=sk)

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> "IdentityKeypair":
        return cls(public_key=x25519_public_from_secret(secret_key), secret_key=bytes(secret_key))

    @property
    def public_key_hex(self) -> str:
        return to_hex(self.public_key)
