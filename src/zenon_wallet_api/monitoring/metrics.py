# File: src/zenon_wallet_api/monitoring/metrics.py

import logging
from prometheus_client import CollectorRegistry, Counter, Gauge, start_http_server

logger = logging.getLogger(__name__)

class MetricsCollector:
    def __init__(self, port: int = 0):
        self.registry = CollectorRegistry()

        # Wallet metrics
        self.wallet_transitions = Counter(
            'wallet_transitions', 'Wallet state transitions',
            ['transition', 'outcome'], registry=self.registry
        )
        self.wallet_unlocked = Gauge(
            'wallet_unlocked', 'Whether the wallet is unlocked', registry=self.registry
        )

        # Node metrics
        self.node_connects = Counter(
            'node_connect_attempts', 'Node connect attempts',
            ['outcome'], registry=self.registry
        )

        # Pipeline metrics
        self.blocks_submitted = Counter(
            'blocks_submitted', 'Account blocks accepted by the node',
            ['kind'], registry=self.registry
        )
        self.chain_head_conflicts = Counter(
            'chain_head_conflicts', 'Submissions rejected for a stale chain head',
            registry=self.registry
        )

        if port:
            start_http_server(port, registry=self.registry)
            logger.info(f"Metrics server listening on port {port}")

    def record_transition(self, transition: str, outcome: str, unlocked: bool):
        self.wallet_transitions.labels(transition=transition, outcome=outcome).inc()
        self.wallet_unlocked.set(1 if unlocked else 0)

    def record_connect(self, outcome: str):
        self.node_connects.labels(outcome=outcome).inc()

    def record_submission(self, kind: str):
        self.blocks_submitted.labels(kind=kind).inc()

    def record_conflict(self):
        self.chain_head_conflicts.inc()
