# tests/test_api.py
import pytest
import os
import tempfile
import shutil
import yaml
from fastapi.testclient import TestClient
from zenon_wallet_api.api import create_app
from zenon_wallet_api.api.dependencies import build_services
from zenon_wallet_api.config.settings import WalletApiConfig
from zenon_wallet_api.network import InMemoryLedger, InMemoryTransport

MNEMONIC = " ".join(["abandon"] * 23 + ["art"])
ADDRESS_0 = "z1qzrqf7r79d6v64yjv4lsgwuskh4quy9cuj39y5"
BENEFICIARY = "z1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqsggv2f"
USER = {"Authorization": "Bearer user-token"}
ADMIN = {"Authorization": "Bearer admin-token"}

class TestWalletApi:
    @pytest.fixture
    def temp_dir(self):
        tmp_dir = tempfile.mkdtemp()
        yield tmp_dir
        shutil.rmtree(tmp_dir)

    @pytest.fixture
    def config(self, temp_dir):
        config_path = os.path.join(temp_dir, "wallet-api.yaml")
        with open(config_path, "w") as f:
            yaml.dump({
                "node": {"url": "memory://"},
                "wallet": {
                    "path": os.path.join(temp_dir, "keystore.json"),
                    "kdf_iterations": 1000
                },
                "auth": {"tokens": {"user-token": "User", "admin-token": "Admin"}},
                "monitoring": {"log_dir": os.path.join(temp_dir, "logs")}
            }, f)
        return WalletApiConfig(config_path)

    @pytest.fixture
    def ledger(self):
        return InMemoryLedger()

    @pytest.fixture
    def transport_options(self):
        return {}

    @pytest.fixture
    def client(self, config, ledger, transport_options):
        services = build_services(config, transport_factory=lambda: InMemoryTransport(ledger, **transport_options))
        with TestClient(create_app(services=services)) as client:
            yield client

    @pytest.fixture
    def restored(self, client):
        response = client.post("/api/wallet/restore", headers=ADMIN, json={"password": "pw", "mnemonic": MNEMONIC})
        assert response.status_code == 200
        return client

    def test_missing_token(self, client):
        response = client.get("/api/wallet/status")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.headers["content-type"].startswith("text/plain")

    def test_unknown_token(self, client):
        response = client.get("/api/wallet/status", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_admin_policy(self, client):
        response = client.post("/api/wallet/init", headers=USER, json={"password": "pw"})
        assert response.status_code == 403
        assert response.headers["content-type"].startswith("text/plain")

        response = client.post("/api/wallet/restore", headers=USER, json={"password": "pw", "mnemonic": MNEMONIC})
        assert response.status_code == 403

    def test_status_uninitialized(self, client):
        response = client.get("/api/wallet/status", headers=ADMIN)
        assert response.status_code == 200
        assert response.json() == {"isInitialized": False, "isUnlocked": False, "baseAddress": None}

    def test_init(self, client):
        response = client.post("/api/wallet/init", headers=ADMIN, json={"password": "pw"})
        assert response.status_code == 200
        assert len(response.json()["mnemonic"].split()) == 24

        status = client.get("/api/wallet/status", headers=USER).json()
        assert status["isInitialized"] and status["isUnlocked"]
        assert status["baseAddress"].startswith("z1")

        response = client.post("/api/wallet/init", headers=ADMIN, json={"password": "pw"})
        assert response.status_code == 409
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["status"] == 409

    def test_restore_lock_unlock(self, restored):
        status = restored.get("/api/wallet/status", headers=USER).json()
        assert status == {"isInitialized": True, "isUnlocked": True, "baseAddress": ADDRESS_0}

        response = restored.post("/api/wallet/lock", headers=USER)
        assert response.status_code == 200
        assert response.text == "Wallet locked"
        assert restored.get("/api/wallet/status", headers=USER).json()["isUnlocked"] is False

        assert restored.post("/api/wallet/unlock", headers=USER, json={"password": "wrong"}).status_code == 401
        assert restored.post("/api/wallet/unlock", headers=USER, json={"password": "pw"}).status_code == 200
        assert restored.post("/api/wallet/unlock", headers=USER, json={"password": "pw"}).status_code == 409

    def test_restore_while_unlocked(self, restored):
        response = restored.post("/api/wallet/restore", headers=ADMIN, json={"password": "pw", "mnemonic": MNEMONIC})
        assert response.status_code == 409

    def test_restore_invalid_mnemonic(self, client):
        response = client.post("/api/wallet/restore", headers=ADMIN, json={"password": "pw", "mnemonic": "abandon art"})
        assert response.status_code == 400

    def test_unlock_uninitialized(self, client):
        response = client.post("/api/wallet/unlock", headers=USER, json={"password": "pw"})
        assert response.status_code == 409

    def test_lock_is_idempotent(self, client):
        assert client.post("/api/wallet/lock", headers=USER).status_code == 200
        assert client.post("/api/wallet/lock", headers=USER).status_code == 200

    def test_accounts(self, restored):
        response = restored.get("/api/wallet/accounts", headers=USER, params={"pageIndex": 0, "pageSize": 2})
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert body["list"][0] == {"index": 0, "address": ADDRESS_0}
        assert body["list"][1]["index"] == 1

    def test_accounts_paging_validation(self, restored):
        response = restored.get("/api/wallet/accounts", headers=USER, params={"pageSize": 0})
        assert response.status_code == 400
        assert response.json()["errors"]

    def test_accounts_require_unlock(self, restored):
        restored.post("/api/wallet/lock", headers=USER)
        response = restored.get("/api/wallet/accounts", headers=USER, params={"pageSize": 1})
        assert response.status_code == 401

    def test_fuse(self, restored, ledger):
        response = restored.post(
            "/api/plasma/0/fuse", headers=USER, json={"address": BENEFICIARY, "amount": "10.5"}
        )
        assert response.status_code == 200
        block = response.json()
        assert block["address"] == ADDRESS_0
        assert block["amount"] == "1050000000"
        assert block["height"] == 1
        assert block["signature"]
        assert ledger.frontiers[ADDRESS_0]["hash"] == block["hash"]

    def test_fuse_numeric_amount(self, restored):
        response = restored.post(
            "/api/plasma/0/fuse", headers=USER, json={"address": BENEFICIARY, "amount": 2}
        )
        assert response.status_code == 200
        assert response.json()["amount"] == "200000000"

    @pytest.mark.parametrize("payload", [
        {"address": "z1invalid", "amount": "1"},
        {"address": BENEFICIARY, "amount": "0.000000001"},
        {"address": BENEFICIARY, "amount": "-1"},
        {"address": BENEFICIARY, "amount": "1E+999999"},
        {"address": BENEFICIARY},
    ])
    def test_fuse_invalid_request(self, restored, payload):
        response = restored.post("/api/plasma/0/fuse", headers=USER, json=payload)
        assert response.status_code == 400

    def test_fuse_negative_index(self, restored):
        response = restored.post("/api/plasma/-1/fuse", headers=USER, json={"address": BENEFICIARY, "amount": "1"})
        assert response.status_code == 400

    def test_fuse_index_out_of_range(self, restored):
        response = restored.post(
            f"/api/plasma/{2**31}/fuse", headers=USER, json={"address": BENEFICIARY, "amount": "1"}
        )
        assert response.status_code == 404

    def test_fuse_locked(self, restored):
        restored.post("/api/wallet/lock", headers=USER)
        response = restored.post("/api/plasma/0/fuse", headers=USER, json={"address": BENEFICIARY, "amount": "1"})
        assert response.status_code == 401

    def test_send_and_received(self, restored):
        recipient = restored.get(
            "/api/wallet/accounts", headers=USER, params={"pageIndex": 1, "pageSize": 1}
        ).json()["list"][0]["address"]

        response = restored.post(
            "/api/transfer/0/send", headers=USER,
            json={"address": recipient, "tokenStandard": "zts1znnxxxxxxxxxxxxx9z4ulx", "amount": "1.5"}
        )
        assert response.status_code == 200
        assert response.json()["amount"] == "150000000"

        response = restored.get("/api/transfer/1/received", headers=USER, params={"pageIndex": 0, "pageSize": 10})
        assert response.status_code == 200
        received = response.json()
        assert received["count"] == 1
        assert received["list"][0]["address"] == ADDRESS_0

    def test_send_invalid_token_standard(self, restored):
        response = restored.post(
            "/api/transfer/0/send", headers=USER,
            json={"address": BENEFICIARY, "tokenStandard": "zts1invalid", "amount": "1"}
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("transport_options", [{"fail_connect": True}])
    def test_node_unavailable(self, restored):
        response = restored.post("/api/plasma/0/fuse", headers=USER, json={"address": BENEFICIARY, "amount": "1"})
        assert response.status_code == 503
        assert response.json()["status"] == 503
