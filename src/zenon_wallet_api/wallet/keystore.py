# src/zenon_wallet_api/wallet/keystore.py
from typing import Optional, Dict, Any
from dataclasses import dataclass
import base64
import json
import logging
import os

import aiofiles
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..exceptions import KeyStoreCorrupted, Unauthorized
from ..utils.config import Config

logger = logging.getLogger(__name__)

def _generate_key_from_password(password: str, salt: bytes, iterations: int) -> bytes:
    """Generate encryption key from password"""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return base64.urlsafe_b64encode(kdf.derive(password.encode()))

@dataclass
class KeyStoreFile:
    """Encrypted wallet seed as persisted on disk"""
    base_address: str
    salt: bytes
    iterations: int
    cipher_text: bytes
    version: int = Config.KEYSTORE_VERSION

    @classmethod
    def encrypt(
        cls,
        seed: bytes,
        password: str,
        base_address: str,
        iterations: int = Config.KDF_ITERATIONS
    ) -> 'KeyStoreFile':
        salt = os.urandom(16)
        fernet = Fernet(_generate_key_from_password(password, salt, iterations))
        return cls(
            base_address=base_address,
            salt=salt,
            iterations=iterations,
            cipher_text=fernet.encrypt(bytes(seed))
        )

    def decrypt(self, password: str) -> bytearray:
        """Decrypt the seed; a wrong password raises Unauthorized"""
        fernet = Fernet(_generate_key_from_password(password, self.salt, self.iterations))
        try:
            return bytearray(fernet.decrypt(self.cipher_text))
        except InvalidToken:
            raise Unauthorized("Invalid password")

    def to_json(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "baseAddress": self.base_address,
            "crypto": {
                "kdf": "pbkdf2-sha256",
                "iterations": self.iterations,
                "salt": base64.b64encode(self.salt).decode(),
                "cipherText": self.cipher_text.decode()
            }
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'KeyStoreFile':
        try:
            crypto = data["crypto"]
            keystore = cls(
                version=int(data["version"]),
                base_address=str(data["baseAddress"]),
                iterations=int(crypto["iterations"]),
                salt=base64.b64decode(crypto["salt"]),
                cipher_text=crypto["cipherText"].encode()
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise KeyStoreCorrupted(f"Malformed key store: {str(e)}")
        if keystore.version != Config.KEYSTORE_VERSION:
            raise KeyStoreCorrupted(f"Unsupported key store version {keystore.version}")
        return keystore

class KeyStoreRepository:
    """Reads and writes the key store file"""

    def __init__(self, path: str):
        self.path = path

    def exists(self) -> bool:
        return os.path.exists(self.path)

    async def load(self) -> Optional[KeyStoreFile]:
        if not self.exists():
            return None

        logger.debug(f"Loading key store from {self.path}")
        async with aiofiles.open(self.path, "rb") as f:
            content = await f.read()
        try:
            data = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise KeyStoreCorrupted(f"Key store is not valid JSON: {str(e)}")
        if not isinstance(data, dict):
            raise KeyStoreCorrupted("Key store is not a JSON object")
        return KeyStoreFile.from_json(data)

    async def save(self, keystore: KeyStoreFile):
        """Write the key store, replacing any previous one"""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        temp_path = f"{self.path}.tmp"
        async with aiofiles.open(temp_path, "w") as f:
            await f.write(json.dumps(keystore.to_json(), indent=2))
        os.replace(temp_path, self.path)
        logger.info(f"Key store written to {self.path}")
