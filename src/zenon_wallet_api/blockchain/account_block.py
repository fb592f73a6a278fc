# src/zenon_wallet_api/blockchain/account_block.py
from typing import Optional, Dict, Any
from dataclasses import dataclass, field, replace
from enum import IntEnum
import base64
import logging

from ..crypto.hash import Hash
from ..exceptions import InvalidArgument
from ..utils.config import Config
from .amount import add_decimals
from .primitives import Address, TokenStandard, EMPTY_ADDRESS, ZNN

logger = logging.getLogger(__name__)

class BlockType(IntEnum):
    GENESIS_RECEIVE = 1
    USER_SEND = 2
    USER_RECEIVE = 3
    CONTRACT_SEND = 4
    CONTRACT_RECEIVE = 5

@dataclass(frozen=True)
class HashHeight:
    """A (hash, height) position in a chain"""
    hash: Hash
    height: int

    @classmethod
    def empty(cls) -> 'HashHeight':
        return cls(hash=Hash.empty(), height=0)

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> 'HashHeight':
        if not data:
            return cls.empty()
        return cls(hash=Hash.parse(data["hash"]), height=int(data["height"]))

    def to_json(self) -> Dict[str, Any]:
        return {"hash": str(self.hash), "height": self.height}

# Head of an account chain: the block the next one must reference
ChainHead = HashHeight

def _u64(value: int) -> bytes:
    return value.to_bytes(8, "big")

@dataclass(frozen=True)
class AccountBlockTemplate:
    """Transaction envelope referencing a position in an account chain.

    Instances are immutable; ``sign`` returns a new template carrying the
    hash, public key and signature.
    """
    block_type: BlockType
    address: Address
    to_address: Address = EMPTY_ADDRESS
    amount: int = 0
    token_standard: TokenStandard = ZNN
    data: bytes = b""
    previous_hash: Hash = field(default_factory=Hash.empty)
    height: int = 0
    momentum_acknowledged: HashHeight = field(default_factory=HashHeight.empty)
    from_block_hash: Hash = field(default_factory=Hash.empty)
    version: int = Config.BLOCK_VERSION
    chain_identifier: int = Config.CHAIN_IDENTIFIER
    fused_plasma: int = 0
    difficulty: int = 0
    nonce: bytes = bytes(8)
    hash: Optional[Hash] = None
    public_key: Optional[bytes] = None
    signature: Optional[bytes] = None

    def __post_init__(self):
        if not isinstance(self.amount, int) or isinstance(self.amount, bool) or self.amount < 0:
            raise InvalidArgument(f"Block amount must be a non-negative integer, got {self.amount!r}")
        if self.amount >= 2**256:
            raise InvalidArgument("Block amount is too large")

    @property
    def is_signed(self) -> bool:
        return self.signature is not None

    def with_chain_head(self, head: ChainHead, momentum: HashHeight) -> 'AccountBlockTemplate':
        """Return an unsigned copy positioned right after ``head``"""
        return replace(
            self,
            previous_hash=head.hash,
            height=head.height + 1,
            momentum_acknowledged=momentum,
            hash=None,
            public_key=None,
            signature=None
        )

    def calculate_hash(self) -> Hash:
        """Calculate block hash over every consensus field"""
        payload = b"".join([
            _u64(self.version),
            _u64(self.chain_identifier),
            _u64(int(self.block_type)),
            bytes(self.previous_hash),
            _u64(self.height),
            bytes(self.momentum_acknowledged.hash),
            _u64(self.momentum_acknowledged.height),
            bytes(self.address),
            bytes(self.to_address),
            self.amount.to_bytes(32, "big"),
            bytes(self.token_standard),
            bytes(self.from_block_hash),
            bytes(Hash.digest(b"")),  # descendant blocks
            bytes(Hash.digest(self.data)),
            _u64(self.fused_plasma),
            _u64(self.difficulty),
            self.nonce
        ])
        return Hash.digest(payload)

    def sign(self, signer) -> 'AccountBlockTemplate':
        """Sign with anything exposing ``public_key`` and ``sign(bytes)``"""
        if self.is_signed:
            raise InvalidArgument("Account block is already signed")
        block_hash = self.calculate_hash()
        signature = signer.sign(bytes(block_hash))
        logger.debug(f"Signed account block {block_hash} at height {self.height}")
        return replace(
            self,
            hash=block_hash,
            public_key=signer.public_key,
            signature=signature
        )

    def to_json(self) -> Dict[str, Any]:
        """Wire representation of the block"""
        def b64(value: Optional[bytes]) -> Optional[str]:
            return base64.b64encode(value).decode() if value is not None else None

        return {
            "version": self.version,
            "chainIdentifier": self.chain_identifier,
            "blockType": int(self.block_type),
            "hash": str(self.hash) if self.hash else None,
            "previousHash": str(self.previous_hash),
            "height": self.height,
            "momentumAcknowledged": self.momentum_acknowledged.to_json(),
            "address": str(self.address),
            "toAddress": str(self.to_address),
            "amount": str(self.amount),
            "tokenStandard": str(self.token_standard),
            "fromBlockHash": str(self.from_block_hash),
            "descendantBlocks": [],
            "data": b64(self.data) or "",
            "fusedPlasma": self.fused_plasma,
            "difficulty": self.difficulty,
            "nonce": self.nonce.hex(),
            "publicKey": b64(self.public_key),
            "signature": b64(self.signature)
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'AccountBlockTemplate':
        def unb64(value: Optional[str]) -> Optional[bytes]:
            return base64.b64decode(value) if value else None

        return cls(
            version=int(data.get("version", Config.BLOCK_VERSION)),
            chain_identifier=int(data.get("chainIdentifier", Config.CHAIN_IDENTIFIER)),
            block_type=BlockType(int(data["blockType"])),
            hash=Hash.parse(data["hash"]) if data.get("hash") else None,
            previous_hash=Hash.parse(data["previousHash"]),
            height=int(data["height"]),
            momentum_acknowledged=HashHeight.from_json(data.get("momentumAcknowledged")),
            address=Address.parse(data["address"]),
            to_address=Address.parse(data["toAddress"]),
            amount=int(data["amount"]),
            token_standard=TokenStandard.parse(data["tokenStandard"]),
            from_block_hash=Hash.parse(data["fromBlockHash"]),
            data=unb64(data.get("data")) or b"",
            fused_plasma=int(data.get("fusedPlasma", 0)),
            difficulty=int(data.get("difficulty", 0)),
            nonce=bytes.fromhex(data.get("nonce") or "00" * 8),
            public_key=unb64(data.get("publicKey")),
            signature=unb64(data.get("signature"))
        )

    def describe(self, decimals: int = Config.COIN_DECIMALS) -> str:
        return (
            f"{self.block_type.name} {self.address} -> {self.to_address} "
            f"{add_decimals(self.amount, decimals)} {self.token_standard} @ {self.height}"
        )
