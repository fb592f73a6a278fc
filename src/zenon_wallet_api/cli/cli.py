# src/zenon_wallet_api/cli/cli.py
import argparse
import sys
from typing import List, Optional

import uvicorn

from ..api.server import create_app
from ..config.settings import WalletApiConfig
from ..monitoring.logging_config import LogConfig, get_logger

logger = get_logger(__name__)

class CLI:
    def main(self, args: List[str]):
        parser = self.create_parser()
        args = parser.parse_args(args)
        
        if not hasattr(args, 'func'):
            parser.print_help()
            return
            
        args.func(args)

    def create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='Zenon wallet API')
        subparsers = parser.add_subparsers(title='commands', dest='command')

        serve = subparsers.add_parser('serve', help='Run the wallet API server')
        serve.add_argument('--config', default='config/wallet-api.yaml', help='Configuration file')
        serve.add_argument('--host', help='Bind host (overrides api.host)')
        serve.add_argument('--port', type=int, help='Bind port (overrides api.port)')
        serve.set_defaults(func=self.serve)

        generate = subparsers.add_parser('generate-config', help='Write a default configuration file')
        generate.add_argument('--config', default='config/wallet-api.yaml', help='Configuration file')
        generate.set_defaults(func=self.generate_config)

        return parser

    def serve(self, args):
        config = WalletApiConfig(args.config)
        LogConfig.from_config(config).setup_logging(config.get('monitoring.log_level'))

        host: Optional[str] = args.host or config.get('api.host')
        port: Optional[int] = args.port or config.get('api.port')
        if not config.get('auth.tokens'):
            logger.warning("No bearer tokens configured, every request will be rejected")

        logger.info(f"Starting wallet API on {host}:{port}, node {config.get('node.url')}")
        uvicorn.run(create_app(config), host=host, port=int(port), log_config=None)

    def generate_config(self, args):
        config = WalletApiConfig(args.config)
        print(f"Configuration at {config.config_path}")

def main():
    cli = CLI()
    cli.main(sys.argv[1:])

if __name__ == "__main__":
    main()
