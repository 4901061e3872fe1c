"""
Aggregator protocol clients
"""

from .zeroex import ZeroExAPI

__all__ = [
    "ZeroExAPI",
]
