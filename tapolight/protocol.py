"""KLAP handshake and encrypted command exchange with a Tapo device."""

from __future__ import annotations

import hashlib
import logging
from typing import Protocol

from .cipher import SEED_SIZE, SHA256_SIZE, TapoCipher, auth_hash, pkcs7_pad

DEFAULT_LOCAL_SEED = bytes(
    [0x01, 0x02, 0x13, 0x04, 0x05, 0x16, 0x07, 0x08,
     0x09, 0x0A, 0x0B, 0x0C, 0x0D, 0x0E, 0x0F, 0x10]
)

_log = logging.getLogger(__name__)


class _Poster(Protocol):
    def post(self, path: str, data: bytes) -> bytes: ...


def _strip_padding(data: bytes) -> bytes:
    if not data:
        return data
    pad_len = data[-1]
    if 1 <= pad_len <= 16 and data[-pad_len:] == bytes([pad_len]) * pad_len:
        return data[:-pad_len]
    return data


class TapoProtocol:
    """Runs the two-step handshake and sends encrypted JSON commands."""

    def __init__(
        self,
        client: _Poster,
        username: str | bytes,
        password: str | bytes,
        local_seed: bytes = DEFAULT_LOCAL_SEED,
    ) -> None:
        if len(local_seed) != SEED_SIZE:
            raise ValueError(f"local_seed must be {SEED_SIZE} bytes")
        self.client = client
        self.local_seed = bytes(local_seed)
        self.auth_hash = auth_hash(username, password)
        self.remote_seed: bytes | None = None
        self.cipher: TapoCipher | None = None

    def handshake(self) -> None:
        """Exchange seeds with the device and set up a fresh session cipher."""
        response = self.client.post("/handshake1", self.local_seed)
        if len(response) < SEED_SIZE:
            raise ValueError("handshake1 response is too short to hold the remote seed")
        remote_seed = bytes(response[:SEED_SIZE])
        server_hash = bytes(response[SEED_SIZE:SEED_SIZE + SHA256_SIZE])

        local_hash = hashlib.sha256(self.local_seed + remote_seed + self.auth_hash).digest()
        _log.debug("local hash %s, server hash %s", local_hash.hex(), server_hash.hex())
        if local_hash != server_hash:
            _log.debug("handshake1 hashes differ")

        handshake2_hash = hashlib.sha256(remote_seed + self.local_seed + self.auth_hash).digest()
        self.client.post("/handshake2", handshake2_hash)

        self.remote_seed = remote_seed
        self.cipher = TapoCipher(self.local_seed, remote_seed, self.auth_hash)

    def send(self, command: str | bytes) -> bytes:
        """Encrypt and post ``command``; return the decrypted response body."""
        if self.cipher is None:
            raise RuntimeError("handshake() must be called before send()")
        payload = command.encode() if isinstance(command, str) else bytes(command)
        _log.info("Sending command: %s", payload.decode(errors="replace"))
        encrypted = self.cipher.encrypt(pkcs7_pad(payload))
        path = f"/request?seq={self.cipher.seq}"
        response = self.client.post(path, encrypted)
        return _strip_padding(self.cipher.decrypt(response))