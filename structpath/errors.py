"""
structpath.errors — Exception types.

Absence is never an error anywhere in structpath: a missing path reads as
None / False / a supplied default.  The only failures are malformed path
text, a list write that would pad past Settings.max_index_gap and, when
strict shape mode is switched on, a mapping whose runtime type cannot be
rebuilt by the shallow cloner.
"""

from typing import Optional


class StructPathError(Exception):
    """Base class for every error raised by structpath."""


class PathSyntaxError(StructPathError, ValueError):
    """A path expression could not be parsed."""

    def __init__(self, message: str, text: str = "", position: Optional[int] = None):
        self.text = text
        self.position = position
        if position is not None:
            message = f"{message} at position {position} in {text!r}"
        super().__init__(message)


class ShapeCloneError(StructPathError, TypeError):
    """A mapping type cannot be shallow-cloned without losing its shape."""

    def __init__(self, shape: type):
        self.shape = shape
        super().__init__(
            f"cannot shallow-clone mapping of type {shape.__qualname__!r} "
            f"without degrading it to a plain dict"
        )


class IndexGapError(StructPathError, IndexError):
    """A list write would pad more positions than Settings.max_index_gap allows."""

    def __init__(self, index: int, length: int, limit: int):
        self.index = index
        self.length = length
        self.limit = limit
        super().__init__(
            f"writing index {index} into a list of length {length} would pad "
            f"{index - length} positions (max_index_gap={limit})"
        )
