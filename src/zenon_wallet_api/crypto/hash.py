# src/zenon_wallet_api/crypto/hash.py
import hashlib

class Hash:
    """32-byte SHA3-256 digest"""

    SIZE = 32

    def __init__(self, value: bytes):
        if len(value) != self.SIZE:
            raise ValueError(f"Hash must be {self.SIZE} bytes, got {len(value)}")
        self.value = bytes(value)

    @classmethod
    def digest(cls, data: bytes) -> 'Hash':
        """Create SHA3-256 hash of raw bytes"""
        return cls(hashlib.sha3_256(data).digest())

    @classmethod
    def parse(cls, text: str) -> 'Hash':
        return cls(bytes.fromhex(text))

    @classmethod
    def empty(cls) -> 'Hash':
        return cls(bytes(cls.SIZE))

    def __bytes__(self) -> bytes:
        return self.value

    def __eq__(self, other) -> bool:
        return isinstance(other, Hash) and self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return self.value.hex()

    def __repr__(self) -> str:
        return f"Hash({self.value.hex()})"
