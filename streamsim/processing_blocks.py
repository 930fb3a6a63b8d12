"""
processing_blocks.py
====================

Operator blocks: blocks that read other blocks' outputs from the stream.

Operators read whatever the stream holds at the moment they step. When a
producer runs at a different rate, or has not stepped yet, the operator
sees the producer's most recently written value (or the zero the slot was
initialised with).

Classes:
    Summation:      Sum of all wired inputs
    Gain:           Element-wise scaling of the wired inputs
    Inverter:       Element-wise negation of the wired inputs
    Differentiator: Backward difference of each wired input over one step

The element-wise operators map their k-th wired input to their k-th
output slot. Output slots without a wired input read zero; inputs wired
beyond ``dim`` are ignored.

Author: StreamSim Framework
Version: 1.0.0
"""

from typing import Any, Sequence

import numpy as np

from . import numeric
from .core_blocks import StreamBlock
from .stream import StreamBuffer


# =========================
# Sum Block
# =========================

class Summation(StreamBlock):
    """
    Sums all wired inputs into a single output.

    The sum is recomputed from scratch on every step; nothing is carried
    over between steps. With no inputs wired the output is zero.

    Example:
        >>> adder = Summation("adder")
        >>> a = sim.register(LinearSource(1, 0))
        >>> b = sim.register(PolynomialSource([0, 1]))
        >>> s = sim.register(adder)
        >>> sim.connect(a, 0, s)
        >>> sim.connect(b, 0, s)
    """

    def __init__(self, name: str = "", **kwargs: Any) -> None:
        super().__init__(name, dim=1, **kwargs)

    def compute(self, t: Any, stream: StreamBuffer) -> Sequence[Any]:
        total = numeric.zero(self.value_type)
        for value in self.read_inputs(stream):
            total += value
        return [total]


# =========================
# Gain Block
# =========================

class Gain(StreamBlock):
    """
    Multiplies each wired input by a scalar gain.

    Computes: output[k] = gain * input[k]

    Example:
        >>> amplifier = Gain(2.0)
        >>> stereo = Gain(0.5, dim=2)
    """

    def __init__(self, gain: Any = 1, dim: int = 1, name: str = "", **kwargs: Any) -> None:
        """
        Initialize a Gain block.

        Args:
            gain: Scalar factor, cast to the Value type at registration.
            dim:  Number of channels. Default: 1
            name: Identifier for this block.
        """
        self._gain_seed = gain
        super().__init__(name, dim=dim, **kwargs)

    def _bind_parameters(self) -> None:
        self.gain = self.to_value(self._gain_seed)

    def compute(self, t: Any, stream: StreamBuffer) -> Sequence[Any]:
        return [self.gain * self.input_value(stream, k) for k in range(self.dim)]


# =========================
# Inverter Block
# =========================

class Inverter(StreamBlock):
    """
    Negates each wired input.

    Computes: output[k] = -input[k]

    Unsigned Value types wrap around, following numpy integer arithmetic.
    """

    def __init__(self, dim: int = 1, name: str = "", **kwargs: Any) -> None:
        super().__init__(name, dim=dim, **kwargs)

    def compute(self, t: Any, stream: StreamBuffer) -> Sequence[Any]:
        zero = numeric.zero(self.value_type)
        return [zero - self.input_value(stream, k) for k in range(self.dim)]


# =========================
# Differentiator Block
# =========================

class Differentiator(StreamBlock):
    """
    Backward-difference derivative of each wired input.

    Computes: output[k] = (input[k] - previous[k]) / step_size

    ``previous`` holds the inputs seen on this block's previous step and
    starts at zero, so the first output is ``input / step_size``. The
    difference is taken over this block's own step size, which only matches
    the producer's rate when both blocks share a step size.

    Attributes:
        previous (np.ndarray): Inputs observed on the previous step

    Example:
        >>> ramp = sim.register(LinearSource(slope=3.0, step_size=0.5))
        >>> slope = sim.register(Differentiator(step_size=0.5))
        >>> sim.connect(ramp, 0, slope)
    """

    def __init__(self, dim: int = 1, name: str = "", **kwargs: Any) -> None:
        super().__init__(name, dim=dim, **kwargs)

    def _bind_parameters(self) -> None:
        self._step_as_value = self.to_value(self.step_size)

    def _reset_state(self) -> None:
        self.previous = np.zeros(self.dim, dtype=self.value_type)

    def compute(self, t: Any, stream: StreamBuffer) -> Sequence[Any]:
        outputs = []
        for k in range(self.dim):
            current = self.input_value(stream, k)
            outputs.append(numeric.cast((current - self.previous[k]) / self._step_as_value, self.value_type))
            self.previous[k] = current
        return outputs


# =========================
# Module Metadata
# =========================

__all__ = [
    'Summation',
    'Gain',
    'Inverter',
    'Differentiator',
]

__version__ = '1.0.0'
__author__ = 'StreamSim Framework'
