"""Symmetric encryption of connection configs.

Connection configs are stored as ``<ivHex>:<encryptedHex>`` using AES-256-CBC
with PKCS7 padding and a random IV per call. The key is the first 32
characters of the base64-encoded SHA-256 digest of the shared secret, which
keeps ciphertexts written by earlier deployments readable.

The format carries no MAC, so it is not tamper-evident. A modified IV decrypts
without error into plaintext whose first block is altered bit for bit, and a
modified ciphertext block garbles that block and flips bits in the next one.
Only a padding failure is detected by ``decrypt``; ``decrypt_config`` rejects
corrupted payloads solely because they no longer parse as a JSON object.
"""

import base64
import hashlib
import json
import os
from typing import Any, Dict

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from nodeflow.exceptions import ConfigError, DecryptionError
from nodeflow.logging import get_logger

logger = get_logger(__name__)

KEY_LENGTH = 32
IV_LENGTH = 16  # AES block size
SEPARATOR = ":"


def derive_key(secret: str) -> bytes:
    """Derive the 32-byte AES key from a shared secret.

    Args:
        secret: Shared secret, e.g. ``Settings.secret``

    Returns:
        Key bytes

    Raises:
        ConfigError: If the secret is empty
    """
    if not secret:
        raise ConfigError("Cannot derive an encryption key from an empty secret")
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.b64encode(digest)[:KEY_LENGTH]


class ConnectionCredentialStore:
    """Encrypts and decrypts connection configuration blobs.

    The key is derived once by the caller (see ``derive_key``) and injected,
    so one store instance can be shared for the lifetime of the process.
    """

    def __init__(self, key: bytes):
        if len(key) != KEY_LENGTH:
            raise ConfigError(
                f"Encryption key must be {KEY_LENGTH} bytes, got {len(key)}"
            )
        self._algorithm = algorithms.AES(key)

    @classmethod
    def from_secret(cls, secret: str) -> "ConnectionCredentialStore":
        return cls(derive_key(secret))

    def encrypt(self, plaintext: str) -> str:
        """Encrypt text, returning ``<ivHex>:<encryptedHex>``."""
        iv = os.urandom(IV_LENGTH)
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

        encryptor = Cipher(self._algorithm, modes.CBC(iv)).encryptor()
        encrypted = encryptor.update(padded) + encryptor.finalize()

        return iv.hex() + SEPARATOR + encrypted.hex()

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a ``<ivHex>:<encryptedHex>`` string.

        Raises:
            DecryptionError: If the format is malformed or the key does not match
        """
        if not isinstance(ciphertext, str) or SEPARATOR not in ciphertext:
            raise DecryptionError("Malformed ciphertext: missing IV separator")

        iv_hex, encrypted_hex = ciphertext.split(SEPARATOR, 1)
        try:
            iv = bytes.fromhex(iv_hex)
            encrypted = bytes.fromhex(encrypted_hex)
        except ValueError as e:
            raise DecryptionError("Malformed ciphertext: invalid hex") from e

        if len(iv) != IV_LENGTH:
            raise DecryptionError("Malformed ciphertext: invalid IV length")
        if not encrypted or len(encrypted) % IV_LENGTH:
            raise DecryptionError("Malformed ciphertext: invalid block length")

        decryptor = Cipher(self._algorithm, modes.CBC(iv)).decryptor()
        padded = decryptor.update(encrypted) + decryptor.finalize()

        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        try:
            plaintext = unpadder.update(padded) + unpadder.finalize()
            return plaintext.decode("utf-8")
        except (ValueError, UnicodeDecodeError) as e:
            # Never include the decrypted bytes in the message
            raise DecryptionError(
                "Unable to decrypt connection config: key mismatch or corrupted data"
            ) from e

    def encrypt_config(self, config: Dict[str, Any]) -> str:
        """Serialize a connection config to JSON and encrypt it."""
        return self.encrypt(json.dumps(config))

    def decrypt_config(self, ciphertext: str) -> Dict[str, Any]:
        """Decrypt a connection config and parse the JSON payload.

        Raises:
            DecryptionError: If decryption fails or the payload is not a JSON object
        """
        plaintext = self.decrypt(ciphertext)
        try:
            config = json.loads(plaintext)
        except ValueError as e:
            raise DecryptionError("Decrypted connection config is not valid JSON") from e
        if not isinstance(config, dict):
            raise DecryptionError("Decrypted connection config is not an object")
        logger.debug(f"Decrypted connection config with keys: {sorted(config)}")
        return config
