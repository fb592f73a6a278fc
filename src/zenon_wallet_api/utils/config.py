# src/zenon_wallet_api/utils/config.py

class Config:
    # Coin configuration
    COIN_DECIMALS = 8
    ZNN_TOKEN_STANDARD = "zts1znnxxxxxxxxxxxxx9z4ulx"
    QSR_TOKEN_STANDARD = "zts1qsrxxxxxxxxxxxxxmrhjll"

    # Embedded contracts
    PLASMA_ADDRESS = "z1qxemdeddedxplasmaxxxxxxxxxxxxxxxxsctrp"
    EMPTY_ADDRESS = "z1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqsggv2f"

    # Bech32 prefixes
    ADDRESS_PREFIX = "z"
    TOKEN_STANDARD_PREFIX = "zts"
    ADDRESS_CORE_SIZE = 20
    TOKEN_STANDARD_SIZE = 10

    # Key derivation
    COIN_TYPE = 73404
    DERIVATION_PATH = "m/44'/73404'/{index}'"
    MAX_ACCOUNT_INDEX = 2**31 - 1
    MNEMONIC_WORDS = 24

    # Account blocks
    BLOCK_VERSION = 1
    CHAIN_IDENTIFIER = 1

    # RPC configuration
    RPC_MAX_PAGE_SIZE = 1024
    NODE_TIMEOUT = 10  # seconds

    # Key store
    KEYSTORE_VERSION = 1
    KDF_ITERATIONS = 100000
