"""
exceptions.py
=============

Error types raised by the stream simulation kernel.

Every error derives from StreamSimError so callers can catch the whole
family at once, and also from the closest built-in exception so existing
``except ValueError`` / ``except IndexError`` handlers keep working.

Classes:
    StreamSimError:              Root of the hierarchy
    NumericCastError:            A value is not representable in the target type
    UnsupportedNumericTypeError: A type is not usable as a Value or Time
    WiringError:                 Base class for graph construction errors
    WiringOutOfRangeError:       connect() referenced a missing output slot
    UnknownBlockError:           A block index does not exist in the graph
    GraphFrozenError:            Wiring attempted after the simulation started
    BlockAlreadyRegisteredError: A block was registered twice
    RunawaySimulationError:      A run exceeded its step or wall-clock guard

Author: StreamSim Framework
Version: 1.0.0
"""

from typing import Any, Optional


class StreamSimError(Exception):
    """Base class for all stream simulation errors."""


class NumericCastError(StreamSimError, ValueError):
    """
    Raised when a value cannot be represented in the destination numeric type.

    Attributes:
        value: The value that was being cast
        target: The numpy scalar type the cast was aimed at
        reason (str): Short description of why the cast failed

    Example:
        >>> cast(300, np.int8)
        Traceback (most recent call last):
        ...
        NumericCastError: cannot cast 300 to int8: out of range [-128, 127]
    """

    def __init__(self, value: Any, target: type, reason: str) -> None:
        self.value = value
        self.target = target
        self.reason = reason
        super().__init__(f"cannot cast {value!r} to {target.__name__}: {reason}")


class UnsupportedNumericTypeError(StreamSimError, TypeError):
    """Raised when a type is not a supported Value or Time type."""


class WiringError(StreamSimError):
    """Base class for errors raised while building a block graph."""


class WiringOutOfRangeError(WiringError, IndexError):
    """
    Raised when connect() names an output slot outside ``[0, dim)``.

    Attributes:
        producer (int): Registration index of the producing block
        slot (int): Requested output slot
        dim (int): Output width of the producing block
    """

    def __init__(self, producer: int, slot: int, dim: int, name: Optional[str] = None) -> None:
        self.producer = producer
        self.slot = slot
        self.dim = dim
        label = name if name else f"block {producer}"
        super().__init__(f"{label}: output slot {slot} out of range [0, {dim})")


class UnknownBlockError(WiringError, IndexError):
    """Raised when a block index is not registered in the graph."""


class GraphFrozenError(WiringError, RuntimeError):
    """Raised when register() or connect() is called after run() started."""


class BlockAlreadyRegisteredError(WiringError, ValueError):
    """Raised when a block that already owns an output region is registered again."""


class RunawaySimulationError(StreamSimError, RuntimeError):
    """
    Raised when a run exceeds its configured step count or wall-clock limit.

    Attributes:
        steps (int): Number of block steps executed in the aborted run
        time: Global clock value reached when the guard tripped
    """

    def __init__(self, message: str, steps: int, time: Any) -> None:
        self.steps = steps
        self.time = time
        super().__init__(message)


__all__ = [
    'StreamSimError',
    'NumericCastError',
    'UnsupportedNumericTypeError',
    'WiringError',
    'WiringOutOfRangeError',
    'UnknownBlockError',
    'GraphFrozenError',
    'BlockAlreadyRegisteredError',
    'RunawaySimulationError',
]
