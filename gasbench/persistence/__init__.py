"""
Sample storage and collection for gas benchmark results.
"""

from .base import SampleStore
from .collector import CostCollector

__all__ = ['SampleStore', 'CostCollector']
