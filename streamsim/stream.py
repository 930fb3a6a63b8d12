"""
stream.py
=========

The shared stream buffer: a flat, append-only numpy array holding the most
recently written output of every registered block.

Blocks observe each other only through this buffer. Each block owns one
contiguous output region, allocated at registration in registration
order; the regions never overlap and together tile the whole buffer.

Classes:
    StreamBuffer: Growable value buffer with region allocation

Author: StreamSim Framework
Version: 1.0.0
"""

import logging
from typing import Any, Sequence

import numpy as np

from .numeric import DEFAULT_VALUE_TYPE, value_type

logger = logging.getLogger(__name__)


class StreamBuffer:
    """
    Flat array of signal values shared by all blocks of a graph.

    The buffer only grows. ``allocate(dim)`` appends ``dim`` zero slots and
    returns the offset of the first one; an offset, once handed out, always
    refers to the same slot.

    Attributes:
        dtype (type): numpy scalar type of every slot

    Example:
        >>> stream = StreamBuffer(np.float64)
        >>> stream.allocate(2)
        0
        >>> stream.allocate(1)
        2
        >>> len(stream)
        3
    """

    def __init__(self, dtype: Any = DEFAULT_VALUE_TYPE) -> None:
        self.dtype: type = value_type(dtype)
        self._data: np.ndarray = np.zeros(0, dtype=self.dtype)

    def allocate(self, dim: int) -> int:
        """
        Extend the buffer by ``dim`` zero-initialised slots.

        Args:
            dim: Number of slots to append. Must be non-negative.

        Returns:
            int: Absolute offset of the first new slot.
        """
        if dim < 0:
            raise ValueError(f"cannot allocate a negative region ({dim})")
        start = len(self._data)
        self._data = np.concatenate([self._data, np.zeros(dim, dtype=self.dtype)])
        logger.debug("Allocated stream region [%d, %d)", start, start + dim)
        return start

    def region(self, start: int, dim: int) -> np.ndarray:
        """Copy of the slots ``[start, start + dim)``."""
        self._check_region(start, dim)
        return self._data[start:start + dim].copy()

    def write(self, start: int, values: Sequence[Any]) -> None:
        """
        Overwrite the slots starting at ``start`` with ``values``.

        Raises:
            IndexError: If the written range does not fit inside the buffer.
        """
        values = np.asarray(values)
        self._check_region(start, len(values))
        self._data[start:start + len(values)] = values

    def reset(self) -> None:
        """Zero every slot without changing the buffer size."""
        self._data.fill(0)

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the whole buffer."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def _check_region(self, start: int, dim: int) -> None:
        if start < 0 or dim < 0 or start + dim > len(self._data):
            raise IndexError(
                f"stream region [{start}, {start + dim}) outside buffer of size {len(self._data)}"
            )

    def __getitem__(self, offset: int):
        return self._data[offset]

    def __setitem__(self, offset: int, value: Any) -> None:
        self._data[offset] = value

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self):
        return iter(self._data)

    def __repr__(self) -> str:
        return f"StreamBuffer(dtype={np.dtype(self.dtype).name}, size={len(self._data)})"


__all__ = [
    'StreamBuffer',
]
