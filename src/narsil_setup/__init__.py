"""
narsil-setup - configure neural embedding API keys for narsil-mcp in editor configs.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
