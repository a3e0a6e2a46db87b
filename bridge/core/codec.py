"""
Reversible obfuscation of short strings with one embedded key.

Token format (kept readable by the desktop client that wrote the existing data):
    base64( AES-256-CBC( PKCS7(utf8(plaintext)) ) )
    key = SHA-256("magickey"), IV = 16 zero bytes

Same plaintext always gives the same token. Any Python str round-trips, lone
surrogates included (the "surrogatepass" error handler). This hides values at
rest, it is not secret management.
"""

import base64
import binascii
import hashlib

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from bridge.core.errors import DecodeError

_PASSPHRASE = b"magickey"
_KEY = hashlib.sha256(_PASSPHRASE).digest()
_IV = bytes(16)
_BLOCK_BITS = algorithms.AES.block_size


def _cipher() -> Cipher:
    return Cipher(algorithms.AES(_KEY), modes.CBC(_IV))


# Encrypt the string
def encode(plaintext: str) -> str:
    data = plaintext.encode("utf-8", errors="surrogatepass")
    padder = padding.PKCS7(_BLOCK_BITS).padder()
    padded = padder.update(data) + padder.finalize()

    encryptor = _cipher().encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(ciphertext).decode("ascii")


# Decrypt a token produced by encode()
def decode(ciphertext: str) -> str:
    try:
        raw = base64.b64decode(ciphertext.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise DecodeError(f"Token is not valid base64: {exc}") from exc

    block_bytes = _BLOCK_BITS // 8
    if not raw or len(raw) % block_bytes:
        raise DecodeError(
            f"Token length {len(raw)} is not a positive multiple of {block_bytes} bytes"
        )

    decryptor = _cipher().decryptor()
    padded = decryptor.update(raw) + decryptor.finalize()

    try:
        unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
        data = unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise DecodeError(f"Token does not decrypt under this key: {exc}") from exc

    # Strict UTF-8 apart from encoded lone surrogates, the ones encode() writes
    try:
        return data.decode("utf-8", errors="surrogatepass")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Decrypted token is not UTF-8 text: {exc}") from exc
