"""
DM CLI - Three-layer client for the Twitter direct-message API.

Layers:
- core: Wire types and signed HTTP client
- sdk: High-level TwitterClient with typed operations
- cli: Command-line interface
"""

from dm_cli.sdk import TwitterClient

__version__ = "0.1.0"
__all__ = ["TwitterClient"]
