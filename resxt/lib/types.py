"""
This module is used as a unified resource for various types that are primarily used for type hints.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from os import PathLike
    from typing import (
        BinaryIO,
        Iterable,
        Mapping,
        Union,
    )

    buf = Union[bytes, bytearray, memoryview]
    pathlike = Union[str, PathLike]

else:
    buf = Any
    pathlike = Any

    BinaryIO = Any
    Iterable = Any
    Mapping = Any


__all__ = [
    'BinaryIO',
    'Iterable',
    'Mapping',
    'buf',
    'pathlike',
]
