# src/zenon_wallet_api/crypto/keys.py
from typing import Tuple
import hashlib
import hmac

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from eth_account.hdaccount.mnemonic import Mnemonic

from ..blockchain.primitives import Address
from ..exceptions import InvalidArgument
from ..utils.config import Config

HARDENED_OFFSET = 0x80000000
ED25519_CURVE_KEY = b"ed25519 seed"

def normalize_mnemonic(mnemonic: str) -> str:
    return " ".join(mnemonic.lower().split())

def validate_mnemonic(mnemonic: str) -> str:
    """Return the normalized mnemonic or raise InvalidArgument"""
    normalized = normalize_mnemonic(mnemonic)
    if not Mnemonic().is_mnemonic_valid(normalized):
        raise InvalidArgument("Invalid mnemonic")
    return normalized

def generate_mnemonic(num_words: int = Config.MNEMONIC_WORDS) -> str:
    return Mnemonic().generate(num_words=num_words)

def mnemonic_to_seed(mnemonic: str) -> bytes:
    """BIP-39 seed of a validated mnemonic (empty passphrase)"""
    return Mnemonic.to_seed(validate_mnemonic(mnemonic))

def derivation_path(index: int) -> str:
    return Config.DERIVATION_PATH.format(index=index)

def _parse_path(path: str) -> Tuple[int, ...]:
    segments = path.split("/")
    if segments[0] != "m":
        raise InvalidArgument(f"Invalid derivation path '{path}'")
    indexes = []
    for segment in segments[1:]:
        # ed25519 only supports hardened derivation
        if not segment.endswith("'"):
            raise InvalidArgument(f"Non-hardened segment in derivation path '{path}'")
        indexes.append(int(segment[:-1]) + HARDENED_OFFSET)
    return tuple(indexes)

def derive_private_key(seed: bytes, path: str) -> bytes:
    """SLIP-10 ed25519 derivation of a 32-byte private key"""
    digest = hmac.new(ED25519_CURVE_KEY, seed, hashlib.sha512).digest()
    key, chain_code = digest[:32], digest[32:]
    for index in _parse_path(path):
        data = b"\x00" + key + index.to_bytes(4, "big")
        digest = hmac.new(chain_code, data, hashlib.sha512).digest()
        key, chain_code = digest[:32], digest[32:]
    return key

class KeyPair:
    def __init__(self, private_key: Ed25519PrivateKey):
        self.private_key = private_key
        self.public_key = private_key.public_key()

    @classmethod
    def from_private_bytes(cls, private_bytes: bytes) -> 'KeyPair':
        return cls(Ed25519PrivateKey.from_private_bytes(private_bytes))

    @classmethod
    def from_seed(cls, seed: bytes, index: int) -> 'KeyPair':
        """Derive the keypair of an account index"""
        return cls.from_private_bytes(derive_private_key(seed, derivation_path(index)))

    def get_public_key(self) -> bytes:
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw
        )

    def get_address(self) -> Address:
        return Address.from_public_key(self.get_public_key())

    def sign(self, message: bytes) -> bytes:
        return self.private_key.sign(message)

    @staticmethod
    def verify(public_key: bytes, message: bytes, signature: bytes) -> bool:
        """Verify a signature using a raw public key"""
        try:
            Ed25519PublicKey.from_public_bytes(public_key).verify(signature, message)
            return True
        except InvalidSignature:
            return False
