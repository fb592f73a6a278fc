# File: src/zenon_wallet_api/config/settings.py

import yaml
import os
from typing import Dict, Any

from ..utils.config import Config

class WalletApiConfig:
    def __init__(self, config_path: str = "config/wallet-api.yaml"):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        if not os.path.exists(self.config_path):
            return self._create_default_config()
        
        with open(self.config_path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
        return self._merge(self.default_config(), loaded)

    @staticmethod
    def default_config() -> Dict[str, Any]:
        return {
            "api": {
                "host": "127.0.0.1",
                "port": 8000
            },
            "node": {
                "url": "ws://127.0.0.1:35998",
                "timeout": Config.NODE_TIMEOUT,
                "chain_identifier": Config.CHAIN_IDENTIFIER
            },
            "wallet": {
                "path": "wallet/keystore.json",
                "kdf_iterations": Config.KDF_ITERATIONS
            },
            "auth": {
                # bearer token -> "User" or "Admin"
                "tokens": {}
            },
            "monitoring": {
                "log_dir": "logs",
                "log_level": "INFO",
                "log_max_bytes": 10 * 1024 * 1024,
                "log_backup_count": 5,
                "metrics_port": 0
            }
        }

    def _create_default_config(self) -> Dict[str, Any]:
        config = self.default_config()
        
        directory = os.path.dirname(self.config_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.config_path, 'w') as f:
            yaml.dump(config, f)
        
        return config

    @classmethod
    def _merge(cls, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = cls._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        try:
            keys = key.split('.')
            value = self.config
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def update(self, key: str, value: Any):
        """Update configuration value."""
        keys = key.split('.')
        config = self.config
        for k in keys[:-1]:
            config = config.setdefault(k, {})
        config[keys[-1]] = value
        
        with open(self.config_path, 'w') as f:
            yaml.dump(self.config, f)
