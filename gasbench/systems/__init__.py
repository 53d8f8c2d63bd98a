"""
Token collection backends for the gas benchmark.
"""

from .base import AssetCollection, CollectionFactory
from .simulated import SimulatedCollection, SimulatedCollectionFactory

__all__ = [
    'AssetCollection', 'CollectionFactory',
    'SimulatedCollection', 'SimulatedCollectionFactory',
]
