# File: src/zenon_wallet_api/api/models.py
from decimal import Decimal
from typing import Annotated, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from ..blockchain.primitives import Address, TokenStandard
from ..exceptions import InvalidArgument
from ..utils.config import Config

def _check_address(value: str) -> str:
    try:
        return str(Address.parse(value))
    except InvalidArgument as e:
        raise ValueError(e.message)

AddressField = Annotated[str, AfterValidator(_check_address)]

class UnlockWalletRequest(BaseModel):
    password: str = Field(min_length=1)

class InitWalletRequest(BaseModel):
    password: str = Field(min_length=1)

class RestoreWalletRequest(BaseModel):
    password: str = Field(min_length=1)
    mnemonic: str = Field(min_length=1)

class FusePlasmaRequest(BaseModel):
    address: AddressField
    amount: Union[str, Decimal]

class SendTransferRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: AddressField
    token_standard: str = Field(alias="tokenStandard")
    amount: Union[str, Decimal]

    @field_validator("token_standard")
    @classmethod
    def check_token_standard(cls, value: str) -> str:
        try:
            return str(TokenStandard.parse(value))
        except InvalidArgument as e:
            raise ValueError(e.message)

class GetWalletAccountsRequest(BaseModel):
    pageIndex: int = Field(default=0, ge=0)
    pageSize: int = Field(default=Config.RPC_MAX_PAGE_SIZE, ge=1, le=Config.RPC_MAX_PAGE_SIZE)

class TransferReceivedRequest(BaseModel):
    pageIndex: int = Field(default=0, ge=0)
    pageSize: int = Field(default=1024, ge=1, le=1024)

class WalletStatusResponse(BaseModel):
    isInitialized: bool
    isUnlocked: bool
    baseAddress: Union[str, None] = None

class InitWalletResponse(BaseModel):
    mnemonic: str
