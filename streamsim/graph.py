"""
graph.py
========

Block registration and wiring.

BlockGraph owns the ordered list of blocks and the shared stream buffer.
Registering a block binds it to the graph's numeric types and hands it the
next free contiguous region of the stream. Connecting two blocks records
an absolute stream offset inside the consumer; the consumer never learns
which block produced it.

Cycles are legal. A consumer wired into a feedback path simply reads the
producer's last written value (or zero before the producer's first step).

Classes:
    BlockGraph: Registry of blocks, output regions and input wiring

Author: StreamSim Framework
Version: 1.0.0
"""

import logging
from typing import Any, List, Tuple

import numpy as np

from . import numeric
from .core_blocks import StreamBlock
from .exceptions import (BlockAlreadyRegisteredError, GraphFrozenError,
                         UnknownBlockError, WiringOutOfRangeError)
from .stream import StreamBuffer

logger = logging.getLogger(__name__)


class BlockGraph:
    """
    Registry of blocks sharing one stream buffer.

    Block identity is the registration index returned by ``register()``.
    Output regions are allocated in registration order, are pairwise
    disjoint and tile the stream exactly.

    Once the graph is frozen (the simulation engine freezes it on its first
    run) neither ``register()`` nor ``connect()`` is accepted.

    Attributes:
        time_type (type): numpy Time type shared by all blocks
        value_type (type): numpy Value type of the stream
        blocks (List[StreamBlock]): Registered blocks in registration order
        stream (StreamBuffer): Shared output buffer

    Example:
        >>> graph = BlockGraph(np.float64, np.float64)
        >>> src = graph.register(ConstantSource([1.0, 2.0]))
        >>> gain = graph.register(Gain(3.0))
        >>> graph.connect(src, 1, gain)
        >>> graph.output_region(gain)
        (2, 3)
    """

    def __init__(self, time_type: Any = numeric.DEFAULT_TIME_TYPE,
                 value_type: Any = numeric.DEFAULT_VALUE_TYPE) -> None:
        self.time_type: type = numeric.time_type(time_type)
        self.value_type: type = numeric.value_type(value_type)
        self.blocks: List[StreamBlock] = []
        self.stream: StreamBuffer = StreamBuffer(self.value_type)
        self._frozen: bool = False

    # -------------------------
    # Construction
    # -------------------------

    def register(self, block: StreamBlock) -> int:
        """
        Add a block to the graph and allocate its output region.

        The block is bound to the graph's Time and Value types before any
        stream slot is allocated, so a failing bind leaves the graph unchanged.

        Args:
            block: A block that has not been registered anywhere yet.

        Returns:
            int: The block's registration index.

        Raises:
            GraphFrozenError:            If the simulation has already started.
            BlockAlreadyRegisteredError: If the block already owns a region.
            TypeError:                   If the block declared different types.
            NumericCastError:            If a block parameter does not fit the types.
            ValueError:                  If the block starts before the simulation clock.
        """
        self._check_not_frozen("register")
        if block.output_start is not None:
            raise BlockAlreadyRegisteredError(
                f"{block.name}: already registered at offset {block.output_start}"
            )
        block.bind(self.time_type, self.value_type)
        self._admit(block)
        start = self.stream.allocate(block.dim)
        block.set_output_region(start)
        self.blocks.append(block)
        index = len(self.blocks) - 1
        logger.debug("Registered %r as block %d, region [%d, %d)",
                     block, index, start, start + block.dim)
        return index

    def _admit(self, block: StreamBlock) -> None:
        """Extra checks on a freshly bound block before it gets a region."""

    def connect(self, producer: int, slot: int, consumer: int) -> None:
        """
        Wire output ``slot`` of ``producer`` into the inputs of ``consumer``.

        Args:
            producer: Registration index of the producing block
            slot:     Output slot of the producer, in ``[0, dim)``
            consumer: Registration index of the consuming block

        Raises:
            GraphFrozenError:      If the simulation has already started.
            UnknownBlockError:     If either index is not registered.
            WiringOutOfRangeError: If ``slot`` is outside the producer's outputs.
                                   The graph is left unchanged.
        """
        self._check_not_frozen("connect")
        source = self.block(producer)
        target = self.block(consumer)
        if not 0 <= slot < source.dim:
            raise WiringOutOfRangeError(producer, slot, source.dim, source.name)
        offset = source.output_start + slot
        target.add_input(offset)
        logger.debug("Connected %s[%d] -> %s (stream offset %d)",
                     source.name, slot, target.name, offset)

    # -------------------------
    # Queries
    # -------------------------

    def block(self, index: int) -> StreamBlock:
        """
        Return the block registered under ``index``.

        Raises:
            UnknownBlockError: If no block has that index. Negative indices
                               are rejected rather than counted from the end.
        """
        if isinstance(index, (bool, np.bool_)) or not isinstance(index, (int, np.integer)):
            raise UnknownBlockError(f"block index must be an integer, got {index!r}")
        if not 0 <= index < len(self.blocks):
            raise UnknownBlockError(f"no block registered at index {index} (graph has {len(self.blocks)})")
        return self.blocks[index]

    def output_region(self, index: int) -> Tuple[int, int]:
        """Half-open stream range ``(start, stop)`` owned by block ``index``."""
        block = self.block(index)
        return block.output_start, block.output_start + block.dim

    def outputs_of(self, index: int) -> np.ndarray:
        """Snapshot (copy) of block ``index``'s current output values."""
        block = self.block(index)
        return self.stream.region(block.output_start, block.dim)

    @property
    def total_dim(self) -> int:
        return len(self.stream)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self.blocks)

    def _check_not_frozen(self, operation: str) -> None:
        if self._frozen:
            raise GraphFrozenError(f"cannot {operation} while the simulation is running; call reset() first")

    # -------------------------
    # Display
    # -------------------------

    def print_topology(self) -> None:
        """
        Print the registered blocks with their output regions and inputs.

        Example output:
            ======================================================================
            STREAM GRAPH TOPOLOGY
            ======================================================================
            Blocks: 3    Stream size: 3    Types: time=float64 value=float64

              0. LinearSource         (LinearSource    ) out [0, 1)  <- []
              1. PolynomialSource     (PolynomialSource) out [1, 2)  <- []
              2. Summation            (Summation       ) out [2, 3)  <- [0, 1]
        """
        print("\n" + "=" * 70)
        print("STREAM GRAPH TOPOLOGY")
        print("=" * 70)
        print(f"Blocks: {len(self.blocks)}    Stream size: {len(self.stream)}    "
              f"Types: time={np.dtype(self.time_type).name} value={np.dtype(self.value_type).name}\n")

        for i, block in enumerate(self.blocks):
            start, stop = block.output_start, block.output_start + block.dim
            block_type = type(block).__name__
            print(f"{i:3d}. {block.name:20s} ({block_type:16s}) out [{start}, {stop})  <- {list(block.inputs)}")

        print("=" * 70 + "\n")


__all__ = [
    'BlockGraph',
]
