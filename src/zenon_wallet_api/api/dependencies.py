# File: src/zenon_wallet_api/api/dependencies.py
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional
import hmac
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config.settings import WalletApiConfig
from ..exceptions import Forbidden, Unauthorized
from ..monitoring.metrics import MetricsCollector
from ..network import NodeConnection, TransportFactory, create_transport_factory
from ..pipeline import TransactionPipeline
from ..wallet import AccountResolver, KeyStoreRepository, WalletState

logger = logging.getLogger(__name__)

class Policy(str, Enum):
    USER = "User"
    ADMIN = "Admin"

# Roles that satisfy each policy
POLICY_ROLES = {
    Policy.USER: {Policy.USER, Policy.ADMIN},
    Policy.ADMIN: {Policy.ADMIN},
}

class Authorizer:
    """Maps bearer tokens to roles"""

    def __init__(self, tokens: Dict[str, str]):
        self.tokens = {token: Policy(role) for token, role in (tokens or {}).items()}

    def role_for(self, token: str) -> Optional[Policy]:
        role = None
        for candidate, candidate_role in self.tokens.items():
            if hmac.compare_digest(candidate.encode(), token.encode()):
                role = candidate_role
        return role

@dataclass
class WalletServices:
    config: WalletApiConfig
    metrics: MetricsCollector
    wallet: WalletState
    resolver: AccountResolver
    node: NodeConnection
    pipeline: TransactionPipeline
    authorizer: Authorizer

def build_services(
    config: WalletApiConfig,
    transport_factory: Optional[TransportFactory] = None,
    metrics: Optional[MetricsCollector] = None
) -> WalletServices:
    """Wire the wallet components from configuration"""
    chain_identifier = int(config.get("node.chain_identifier"))
    metrics = metrics or MetricsCollector(int(config.get("monitoring.metrics_port", 0)))
    if transport_factory is None:
        transport_factory = create_transport_factory(
            config.get("node.url"),
            float(config.get("node.timeout")),
            chain_identifier
        )

    wallet = WalletState(
        KeyStoreRepository(config.get("wallet.path")),
        kdf_iterations=int(config.get("wallet.kdf_iterations")),
        metrics=metrics
    )
    resolver = AccountResolver(wallet)
    node = NodeConnection(transport_factory, metrics=metrics)
    return WalletServices(
        config=config,
        metrics=metrics,
        wallet=wallet,
        resolver=resolver,
        node=node,
        pipeline=TransactionPipeline(resolver, node, chain_identifier, metrics),
        authorizer=Authorizer(config.get("auth.tokens", {}))
    )

def get_services(request: Request) -> WalletServices:
    return request.app.state.services

bearer_scheme = HTTPBearer(auto_error=False)

def require_policy(policy: Policy):
    """Dependency enforcing an authorization policy on a route"""
    async def check(
        services: WalletServices = Depends(get_services),
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
    ) -> Policy:
        if credentials is None:
            raise Unauthorized("Missing bearer token")
        role = services.authorizer.role_for(credentials.credentials)
        if role is None:
            raise Unauthorized("Invalid bearer token")
        if role not in POLICY_ROLES[policy]:
            logger.warning(f"Role {role.value} denied by policy {policy.value}")
            raise Forbidden(f"Requires {policy.value} authorization policy")
        return role
    return check
