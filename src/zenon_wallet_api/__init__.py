"""Wallet management service for Zenon Network of Momentum nodes."""

__version__ = "0.1.0"
