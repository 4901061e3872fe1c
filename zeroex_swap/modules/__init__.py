"""
Pipeline stages for the swap executor
"""

from .quote import QuoteService
from .allowance import AllowanceManager
from .signature import SignatureEmbedder, embed_signature, signature_length_field
from .submit import TransactionSubmitter
from .swap import SwapPipeline
from .report import format_sources, format_route, format_taxes

__all__ = [
    "QuoteService",
    "AllowanceManager",
    "SignatureEmbedder",
    "embed_signature",
    "signature_length_field",
    "TransactionSubmitter",
    "SwapPipeline",
    "format_sources",
    "format_route",
    "format_taxes",
]
