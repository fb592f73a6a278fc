# src/zenon_wallet_api/blockchain/primitives.py
from typing import Union
import hashlib

from bech32 import bech32_decode, bech32_encode, convertbits

from ..exceptions import InvalidArgument
from ..utils.config import Config

def _encode(prefix: str, core: bytes) -> str:
    return bech32_encode(prefix, convertbits(core, 8, 5))

def _decode(prefix: str, text: str, size: int, kind: str) -> bytes:
    hrp, data = bech32_decode(text)
    if hrp is None or hrp != prefix:
        raise InvalidArgument(f"Invalid {kind} '{text}'")
    core = convertbits(data, 5, 8, False)
    if core is None or len(core) != size:
        raise InvalidArgument(f"Invalid {kind} '{text}'")
    return bytes(core)

class Address:
    """Account address: 20 bytes, bech32 encoded with the 'z' prefix"""

    USER_BYTE = 0
    CONTRACT_BYTE = 1

    def __init__(self, core: bytes):
        if len(core) != Config.ADDRESS_CORE_SIZE:
            raise InvalidArgument(f"Address core must be {Config.ADDRESS_CORE_SIZE} bytes")
        self.core = bytes(core)

    @classmethod
    def from_public_key(cls, public_key: bytes) -> 'Address':
        digest = hashlib.sha3_256(public_key).digest()
        return cls(bytes([cls.USER_BYTE]) + digest[:Config.ADDRESS_CORE_SIZE - 1])

    @classmethod
    def parse(cls, value: Union[str, 'Address']) -> 'Address':
        if isinstance(value, Address):
            return value
        return cls(_decode(Config.ADDRESS_PREFIX, value.strip(), Config.ADDRESS_CORE_SIZE, "address"))

    @property
    def is_embedded(self) -> bool:
        return self.core[0] == self.CONTRACT_BYTE

    def __bytes__(self) -> bytes:
        return self.core

    def __eq__(self, other) -> bool:
        return isinstance(other, Address) and self.core == other.core

    def __hash__(self) -> int:
        return hash(self.core)

    def __str__(self) -> str:
        return _encode(Config.ADDRESS_PREFIX, self.core)

    def __repr__(self) -> str:
        return f"Address({self})"

class TokenStandard:
    """Token identifier: 10 bytes, bech32 encoded with the 'zts' prefix"""

    def __init__(self, core: bytes):
        if len(core) != Config.TOKEN_STANDARD_SIZE:
            raise InvalidArgument(f"Token standard must be {Config.TOKEN_STANDARD_SIZE} bytes")
        self.core = bytes(core)

    @classmethod
    def parse(cls, value: Union[str, 'TokenStandard']) -> 'TokenStandard':
        if isinstance(value, TokenStandard):
            return value
        return cls(_decode(Config.TOKEN_STANDARD_PREFIX, value.strip(), Config.TOKEN_STANDARD_SIZE, "token standard"))

    def __bytes__(self) -> bytes:
        return self.core

    def __eq__(self, other) -> bool:
        return isinstance(other, TokenStandard) and self.core == other.core

    def __hash__(self) -> int:
        return hash(self.core)

    def __str__(self) -> str:
        return _encode(Config.TOKEN_STANDARD_PREFIX, self.core)

    def __repr__(self) -> str:
        return f"TokenStandard({self})"

ZNN = TokenStandard.parse(Config.ZNN_TOKEN_STANDARD)
QSR = TokenStandard.parse(Config.QSR_TOKEN_STANDARD)
PLASMA_ADDRESS = Address.parse(Config.PLASMA_ADDRESS)
EMPTY_ADDRESS = Address.parse(Config.EMPTY_ADDRESS)
