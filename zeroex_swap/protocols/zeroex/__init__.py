"""
0x Swap API integration
"""

from .api import ZeroExAPI
from .constants import (
    PRICE_ENDPOINT,
    QUOTE_ENDPOINT,
    SOURCES_ENDPOINT,
    PERMIT2_ADDRESS,
    SIGNATURE_LENGTH_FIELD_BYTES,
)

__all__ = [
    "ZeroExAPI",
    "PRICE_ENDPOINT",
    "QUOTE_ENDPOINT",
    "SOURCES_ENDPOINT",
    "PERMIT2_ADDRESS",
    "SIGNATURE_LENGTH_FIELD_BYTES",
]
