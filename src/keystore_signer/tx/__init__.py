"""
Transaction models and canonical encoding.
"""

from .transaction import TransactionRequest, SignedTransaction

__all__ = ["TransactionRequest", "SignedTransaction"]
