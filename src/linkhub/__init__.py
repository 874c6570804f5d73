"""
Client wrappers for blockchain data APIs.

This library provides:
- An HTTP client with default configuration and retry support
- A GraphQL client built on top of the HTTP client
- Structured logging and settings helpers
- Response schemas for TON Center and Ethereum JSON-RPC
"""

__version__ = "1.0.0"
__author__ = "LinkHub Team"
