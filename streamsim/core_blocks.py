"""
core_blocks.py
==============

Base class for every block of the stream simulation kernel.

A block is a unit of computation with a fixed output width, its own clock
and step size, and a private list of stream offsets it reads from. The
scheduler only ever talks to a block through the small contract defined
here:

    step(stream)               advance the clock, compute, write own region
    next_time()                time of the next step (no side effects)
    dim                        fixed output width
    add_input(offset)          record one absolute stream offset (wiring)
    set_output_region(start)   assign the output base offset (registration)

Blocks are built standalone from plain Python seed values. At registration
the graph binds them to its Time and Value types with ``bind()``, which
casts every seed through the checked numeric cast.

Classes:
    StreamBlock: Base class for all simulation blocks

Author: StreamSim Framework
Version: 1.0.0
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from . import numeric
from .exceptions import BlockAlreadyRegisteredError
from .stream import StreamBuffer

logger = logging.getLogger(__name__)


# =========================
# Base Block Class
# =========================

class StreamBlock:
    """
    Base class for all stream simulation blocks.

    Subclasses implement ``compute(t, stream)`` and, when they carry typed
    parameters or internal state, ``_bind_parameters()`` and
    ``_reset_state()``. Everything else (clock handling, wiring, output
    placement) lives here.

    A block is always ready: the scheduler may step it whenever it holds
    the earliest next time. ``step()`` advances the clock first and then
    computes, so a block started at ``t0`` produces its first output for
    ``t0 + step_size``.

    Attributes:
        name (str): Identifier used in logs, error messages and topology output
        time: Current block clock (Time type once bound)
        step_size: Clock advance per step (Time type once bound)
        time_type (type): Bound numpy Time type, None before binding
        value_type (type): Bound numpy Value type, None before binding

    Example:
        >>> class Counter(StreamBlock):
        ...     def compute(self, t, stream):
        ...         return [self.to_value(t)]
        >>> block = Counter("counter", step_size=1, time_type=np.uint32,
        ...                 value_type=np.int64)
        >>> block.next_time()
        1
    """

    def __init__(self, name: str = "", dim: int = 1, step_size: Any = None,
                 start_time: Any = 0, time_type: Any = None, value_type: Any = None) -> None:
        """
        Initialize a StreamBlock.

        Args:
            name:       Identifier for this block. Defaults to the class name.
            dim:        Number of output slots. Fixed for the block's lifetime.
            step_size:  Clock advance per step. None means the default of
                        the bound Time type (1 for integral, 0.1 for floating).
            start_time: Initial clock value. Default: 0
            time_type:  Optional Time type. When given (or value_type is
                        given) the block is bound immediately, and the graph
                        refuses to register it under a different type.
            value_type: Optional Value type, same rules as time_type.

        Raises:
            ValueError: If dim is negative.
        """
        if dim < 0:
            raise ValueError(f"{name or type(self).__name__}: dim must be non-negative, got {dim}")
        self.name: str = name if name else type(self).__name__
        self._dim: int = int(dim)
        self._inputs: List[int] = []
        self._output_start: Optional[int] = None

        self._step_size_seed = step_size
        self._start_time_seed = start_time
        self._declared_time_type = numeric.time_type(time_type) if time_type is not None else None
        self._declared_value_type = numeric.value_type(value_type) if value_type is not None else None

        self.time_type: Optional[type] = None
        self.value_type: Optional[type] = None
        self.time = None
        self.step_size = None
        self._start_time = None

        if time_type is not None or value_type is not None:
            self.bind(self._declared_time_type or numeric.DEFAULT_TIME_TYPE,
                      self._declared_value_type or numeric.DEFAULT_VALUE_TYPE)

    # -------------------------
    # Type binding
    # -------------------------

    def bind(self, time_type: Any, value_type: Any) -> None:
        """
        Bind the block to a Time and Value type.

        Casts the start time, the step size and every subclass parameter
        into the bound types, then resets the block's clock and state.

        Args:
            time_type:  Time type of the owning graph
            value_type: Value type of the owning graph

        Raises:
            TypeError:        If the block declared a different type at construction.
            NumericCastError: If a seed value is not representable in the bound type.
            ValueError:       If the resulting step size is not positive.
        """
        time_type = numeric.time_type(time_type)
        value_type = numeric.value_type(value_type)
        if self._declared_time_type is not None and self._declared_time_type is not time_type:
            raise TypeError(
                f"{self.name}: declared time type {np.dtype(self._declared_time_type).name}, "
                f"cannot bind to {np.dtype(time_type).name}"
            )
        if self._declared_value_type is not None and self._declared_value_type is not value_type:
            raise TypeError(
                f"{self.name}: declared value type {np.dtype(self._declared_value_type).name}, "
                f"cannot bind to {np.dtype(value_type).name}"
            )

        if self._step_size_seed is None:
            step_size = numeric.default_step_size(time_type)
        else:
            step_size = numeric.cast(self._step_size_seed, time_type)
        if not step_size > 0:
            raise ValueError(f"{self.name}: step size must be positive, got {step_size}")
        start_time = numeric.cast(self._start_time_seed, time_type)

        previous = (self.time_type, self.value_type, self.step_size, self._start_time)
        self.time_type = time_type
        self.value_type = value_type
        self.step_size = step_size
        self._start_time = start_time
        try:
            self._bind_parameters()
        except (TypeError, ValueError):
            # a rejected bind leaves the block as it was
            self.time_type, self.value_type, self.step_size, self._start_time = previous
            raise
        self.reset()

    @property
    def is_bound(self) -> bool:
        return self.time_type is not None

    @property
    def start_time(self):
        """Bound start time, None before binding."""
        return self._start_time

    def _bind_parameters(self) -> None:
        """Cast subclass seed parameters into ``self.value_type``. Override as needed."""

    def to_value(self, x: Any):
        """Checked cast of ``x`` into this block's Value type."""
        return numeric.cast(x, self.value_type)

    # -------------------------
    # Scheduling contract
    # -------------------------

    def next_time(self):
        """
        Time at which the next call to ``step()`` logically occurs.

        Side-effect free and non-decreasing across steps.

        Raises:
            NumericCastError: If the next time is not representable in the
                              Time type (the clock would wrap or overflow).
        """
        self._require_bound()
        return numeric.checked_add(self.time, self.step_size, self.time_type)

    def get_next_time(self):
        return self.next_time()

    def step(self, stream: StreamBuffer) -> None:
        """
        Advance the clock by one step and write this block's outputs.

        Reads only stream slots, writes only ``[output_start, output_start + dim)``.

        Args:
            stream: The shared stream buffer of the owning graph.

        Raises:
            RuntimeError: If the block has not been registered.
            ValueError:   If compute() returned the wrong number of values.
        """
        self._require_registered()
        self.time = self.next_time()
        values = self.compute(self.time, stream)
        self._write_outputs(stream, values)

    def compute(self, t: Any, stream: StreamBuffer) -> Sequence[Any]:
        """
        Compute this block's output values for time ``t``.

        This is the core method that must be implemented by all subclasses.

        Args:
            t:      The block's clock after advancing (Time type)
            stream: Shared stream buffer; read inputs via ``read_inputs()``
                    or ``input_value()``. Must not be written directly.

        Returns:
            Sequence of exactly ``dim`` values of the block's Value type.

        Raises:
            NotImplementedError: If subclass doesn't implement this method
        """
        raise NotImplementedError(f"compute() must be implemented by {self.__class__.__name__}")

    def reset(self) -> None:
        """
        Return the clock to its start time and clear internal state.

        Wiring and output placement are kept.
        """
        self._require_bound()
        self.time = self._start_time
        self._reset_state()

    def _reset_state(self) -> None:
        """Clear subclass state. Override in stateful blocks."""

    # -------------------------
    # Wiring and placement
    # -------------------------

    @property
    def dim(self) -> int:
        return self._dim

    def get_dim(self) -> int:
        return self._dim

    @property
    def inputs(self) -> Tuple[int, ...]:
        """Absolute stream offsets this block reads, in wiring order."""
        return tuple(self._inputs)

    def add_input(self, offset: int) -> None:
        """Append one absolute stream offset to this block's inputs."""
        if offset < 0:
            raise ValueError(f"{self.name}: input offset must be non-negative, got {offset}")
        self._inputs.append(int(offset))

    @property
    def output_start(self) -> Optional[int]:
        return self._output_start

    def get_output_start(self) -> Optional[int]:
        return self._output_start

    def set_output_region(self, start: int) -> None:
        """
        Assign the base offset of this block's output region.

        Raises:
            BlockAlreadyRegisteredError: If the region was already assigned.
        """
        if self._output_start is not None:
            raise BlockAlreadyRegisteredError(
                f"{self.name}: output region already assigned at offset {self._output_start}"
            )
        if start < 0:
            raise ValueError(f"{self.name}: output start must be non-negative, got {start}")
        self._output_start = int(start)

    # -------------------------
    # Stream access helpers
    # -------------------------

    def read_inputs(self, stream: StreamBuffer) -> List[Any]:
        """Current stream values at every wired input offset."""
        return [stream[offset] for offset in self._inputs]

    def input_value(self, stream: StreamBuffer, k: int):
        """Value at the ``k``-th wired input, or zero if fewer inputs are wired."""
        if k < len(self._inputs):
            return stream[self._inputs[k]]
        return numeric.zero(self.value_type)

    def _write_outputs(self, stream: StreamBuffer, values: Sequence[Any]) -> None:
        values = np.asarray(values, dtype=self.value_type)
        if values.shape != (self._dim,):
            raise ValueError(
                f"{self.name}: expected {self._dim} output value(s), got shape {values.shape}"
            )
        stream.write(self._output_start, values)

    def _require_bound(self) -> None:
        if not self.is_bound:
            raise RuntimeError(f"{self.name}: block is not bound to a time/value type")

    def _require_registered(self) -> None:
        self._require_bound()
        if self._output_start is None:
            raise RuntimeError(f"{self.name}: block has no output region; register it first")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"{self.__class__.__name__}('{self.name}')"


# =========================
# Module Metadata
# =========================

__all__ = [
    'StreamBlock',
]

__version__ = '1.0.0'
__author__ = 'StreamSim Framework'
