# main.py
from zenon_wallet_api.cli.cli import main

if __name__ == "__main__":
    main()
