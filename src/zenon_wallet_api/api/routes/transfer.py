# File: src/zenon_wallet_api/api/routes/transfer.py
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from ...pipeline import OperationKind, SendParams
from ..dependencies import Policy, WalletServices, get_services, require_policy
from ..models import SendTransferRequest, TransferReceivedRequest

router = APIRouter(prefix="/api/transfer", tags=["Transfer"])

@router.post("/{accountIndex}/send", dependencies=[Depends(require_policy(Policy.USER))])
async def send_transfer(
    request: SendTransferRequest,
    accountIndex: int = Path(ge=0),
    services: WalletServices = Depends(get_services)
):
    """Sends tokens to an address"""
    block = await services.pipeline.build_and_submit(
        accountIndex,
        OperationKind.SEND,
        SendParams(
            address=request.address,
            token_standard=request.token_standard,
            amount=request.amount
        )
    )
    return block.to_json()

@router.get("/{accountIndex}/received", dependencies=[Depends(require_policy(Policy.USER))])
async def get_received(
    request: Annotated[TransferReceivedRequest, Query()],
    accountIndex: int = Path(ge=0),
    services: WalletServices = Depends(get_services)
):
    """Lists transfers sent to an account that it has not received yet"""
    await services.node.ensure_connected()
    account = services.resolver.get_account(accountIndex)
    return await services.node.get_unreceived_blocks(
        account.address, request.pageIndex, request.pageSize
    )
