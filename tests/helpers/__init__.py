from .keystore_factory import make_keystore, with_changes
from . import vectors

__all__ = [
    "make_keystore",
    "with_changes",
    "vectors",
]
