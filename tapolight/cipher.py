"""Session cipher for the Tapo KLAP transport: key derivation, AES-CBC and signing."""

from __future__ import annotations

import hashlib

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

SEED_SIZE = 16
SHA256_SIZE = 32
LOCAL_HASH_SIZE = SEED_SIZE * 2 + SHA256_SIZE
KEY_SIZE = 16
IV_SIZE = 12
SIG_SIZE = 28
BLOCK_SIZE = 16

_SEQ_MASK = 0xFFFFFFFF


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode() if isinstance(value, str) else bytes(value)


def auth_hash(username: str | bytes, password: str | bytes) -> bytes:
    """Return SHA-256 over the SHA-1 digests of the username and the password."""
    digests = hashlib.sha1(_as_bytes(username)).digest() + hashlib.sha1(_as_bytes(password)).digest()
    return hashlib.sha256(digests).digest()


def pkcs7_pad(data: bytes) -> bytes:
    """Pad ``data`` to a whole number of AES blocks, PKCS#7 style."""
    pad_len = BLOCK_SIZE - len(data) % BLOCK_SIZE
    return bytes(data) + bytes([pad_len]) * pad_len


def _seq_bytes(seq: int) -> bytes:
    return seq.to_bytes(4, "big")


class TapoCipher:
    """Encrypts requests and decrypts responses for one handshake session."""

    def __init__(self, local_seed: bytes, remote_seed: bytes, auth_hash: bytes) -> None:
        for name, value, size in (
            ("local_seed", local_seed, SEED_SIZE),
            ("remote_seed", remote_seed, SEED_SIZE),
            ("auth_hash", auth_hash, SHA256_SIZE),
        ):
            if len(value) != size:
                raise ValueError(f"{name} must be {size} bytes, got {len(value)}")

        local_hash = bytes(local_seed) + bytes(remote_seed) + bytes(auth_hash)

        self.key = hashlib.sha256(b"lsk" + local_hash).digest()[:KEY_SIZE]
        iv_digest = hashlib.sha256(b"iv" + local_hash).digest()
        self.iv = iv_digest[:IV_SIZE]
        self.seq = int.from_bytes(iv_digest[-4:], "big")
        self.sig = hashlib.sha256(b"ldk" + local_hash).digest()[:SIG_SIZE]

    def _aes(self) -> Cipher:
        iv_seq = self.iv + _seq_bytes(self.seq)
        return Cipher(algorithms.AES(self.key), modes.CBC(iv_seq))

    def encrypt(self, data: bytes) -> bytes:
        """Advance the sequence number and return signature followed by ciphertext.

        ``data`` must already be padded to a multiple of 16 bytes.
        """
        if len(data) % BLOCK_SIZE:
            raise ValueError("data length must be a multiple of 16 bytes")
        self.seq = (self.seq + 1) & _SEQ_MASK
        encryptor = self._aes().encryptor()
        ciphertext = encryptor.update(bytes(data)) + encryptor.finalize()
        signature = hashlib.sha256(self.sig + _seq_bytes(self.seq) + ciphertext).digest()
        return signature + ciphertext

    def decrypt(self, data: bytes) -> bytes:
        """Strip the signature and decrypt with the current sequence number.

        Padding is left in place.
        """
        if len(data) < SHA256_SIZE:
            raise ValueError("data is shorter than the signature")
        ciphertext = bytes(data[SHA256_SIZE:])
        if len(ciphertext) % BLOCK_SIZE:
            raise ValueError("ciphertext length must be a multiple of 16 bytes")
        decryptor = self._aes().decryptor()
        return decryptor.update(ciphertext) + decryptor.finalize()