"""
confidential_core.codec
-----------------------
Wire framing for confidential messages:

    0x || hex( nonce[16] || sender_public_key[32] || ciphertext )

Inputs and outputs are 0x-prefixed hex strings; output is always lowercase.
"""

from __future__ import annotations
import os

from .constants import FRAME_HEADER_SIZE, MIN_FRAME_SIZE, NONCE_SIZE
from .crypto import IdentityKeypair, box_open, box_seal
from .errors import FrameTooShort
from .utils import from_hex, to_hex

EMPTY_AAD = b""


class CryptoCodec:
    def __init__(self, identity: IdentityKeypair):
        self.identity = identity

    def seal(self, message: bytes, remote_public_key: bytes) -> bytes:
        nonce = os.urandom(NONCE_SIZE)
        ciphertext = box_seal(nonce, message, EMPTY_AAD, remote_public_key, self.identity.secret_key)
        return nonce + self.identity.public_key + ciphertext

    def open(self, frame: bytes) -> bytes:
        # 48 header bytes plus the AEAD tag, even for an empty message
        if len(frame) < MIN_FRAME_SIZE:
            raise FrameTooShort(len(frame), MIN_FRAME_SIZE)
        nonce = frame[:NONCE_SIZE]
        sender_public_key = frame[NONCE_SIZE:FRAME_HEADER_SIZE]
        ciphertext = frame[FRAME_HEADER_SIZE:]
        return box_open(nonce, ciphertext, EMPTY_AAD, sender_public_key, self.identity.secret_key)

    async def encrypt(self, message: str, remote_public_key: str) -> str:
        """Encrypt a hex message to a hex public key; returns the hex frame."""
        msg = from_hex(message)
        key = from_hex(remote_public_key)
        return to_hex(self.seal(msg, key))

    async def decrypt(self, framed: str) -> str:
        """Open a hex frame addressed to this identity; returns hex plaintext."""
        return to_hex(self.open(from_hex(framed)))
