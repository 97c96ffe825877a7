"""
Wipeable container for key material.

SecretBytes keeps its contents in a mutable bytearray so they can be
overwritten with zeros once the holder is done with them. Use it as a
context manager to wipe on every exit path.
"""

from __future__ import annotations
from typing import Optional, Union


class SecretBytes:
    """Mutable secret buffer that zeroes itself on wipe()."""

    __slots__ = ("_buf", "_wiped")

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        """
        Copy data into a private buffer.

        Args:
            data: Secret bytes. If a bytearray is passed, the caller's
                buffer is zeroed after copying.
        """
        self._buf = bytearray(data)
        self._wiped = False
        if isinstance(data, bytearray):
            data[:] = bytes(len(data))

    @property
    def wiped(self) -> bool:
        """True once the buffer has been zeroed."""
        return self._wiped

    def __len__(self) -> int:
        return len(self._buf)

    def view(self, start: int = 0, stop: Optional[int] = None) -> memoryview:
        """Read-only view of a slice, without copying."""
        if self._wiped:
            raise ValueError("Secret has been wiped")
        return memoryview(self._buf)[start:stop].toreadonly()

    def reveal(self) -> bytes:
        """
        Return an immutable copy of the secret.

        The copy cannot be wiped; keep its lifetime short.
        """
        if self._wiped:
            raise ValueError("Secret has been wiped")
        return bytes(self._buf)

    def wipe(self) -> None:
        """Overwrite the buffer with zeros."""
        for i in range(len(self._buf)):
            self._buf[i] = 0
        self._wiped = True

    def __enter__(self) -> SecretBytes:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __del__(self):
        if getattr(self, "_buf", None) is not None:
            self.wipe()

    def __eq__(self, other) -> bool:
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "wiped" if self._wiped else f"{len(self._buf)} bytes"
        return f"SecretBytes(<{state}>)"


__all__ = ["SecretBytes"]
