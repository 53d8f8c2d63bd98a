"""
Gas benchmark for bulk ERC-721 operations.
"""

__version__ = "0.1.0"
