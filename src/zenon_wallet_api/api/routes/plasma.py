# File: src/zenon_wallet_api/api/routes/plasma.py
from fastapi import APIRouter, Depends, Path

from ...pipeline import FuseParams, OperationKind
from ..dependencies import Policy, WalletServices, get_services, require_policy
from ..models import FusePlasmaRequest

router = APIRouter(prefix="/api/plasma", tags=["Plasma"])

@router.post("/{accountIndex}/fuse", dependencies=[Depends(require_policy(Policy.USER))])
async def fuse_plasma(
    request: FusePlasmaRequest,
    accountIndex: int = Path(ge=0),
    services: WalletServices = Depends(get_services)
):
    """Fuses QSR to an address to generate plasma"""
    block = await services.pipeline.build_and_submit(
        accountIndex,
        OperationKind.FUSE,
        FuseParams(address=request.address, amount=request.amount)
    )
    return block.to_json()
