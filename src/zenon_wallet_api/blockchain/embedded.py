# src/zenon_wallet_api/blockchain/embedded.py
import hashlib

from .account_block import AccountBlockTemplate, BlockType
from .primitives import Address, TokenStandard, PLASMA_ADDRESS, QSR

def function_selector(signature: str) -> bytes:
    """First 4 bytes of the SHA3-256 digest of an ABI function signature"""
    return hashlib.sha3_256(signature.encode()).digest()[:4]

def encode_address_argument(address: Address) -> bytes:
    return bytes(address).rjust(32, b"\x00")

class Plasma:
    """Account-block builders for the embedded plasma contract"""

    FUSE_SIGNATURE = "Fuse(address)"

    @classmethod
    def fuse(cls, producer: Address, beneficiary: Address, amount: int) -> AccountBlockTemplate:
        """Stake ``amount`` QSR base units to generate plasma for ``beneficiary``"""
        data = function_selector(cls.FUSE_SIGNATURE) + encode_address_argument(beneficiary)
        return AccountBlockTemplate(
            block_type=BlockType.USER_SEND,
            address=producer,
            to_address=PLASMA_ADDRESS,
            amount=amount,
            token_standard=QSR,
            data=data
        )

def send(producer: Address, recipient: Address, token_standard: TokenStandard, amount: int) -> AccountBlockTemplate:
    return AccountBlockTemplate(
        block_type=BlockType.USER_SEND,
        address=producer,
        to_address=recipient,
        amount=amount,
        token_standard=token_standard
    )
