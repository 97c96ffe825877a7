"""
Transaction signers.
"""

from .eth import TransactionSigner, sign

__all__ = ["TransactionSigner", "sign"]
