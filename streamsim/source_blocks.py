"""
source_blocks.py
================

Signal source blocks: blocks that compute their output from their own
clock alone and ignore any wired inputs.

Classes:
    ConstantSource:    Outputs a fixed vector on every step
    LinearSource:      Outputs slope * t + offset
    PolynomialSource:  Outputs sum(c[i] * t**i)
    ExponentialSource: Outputs base ** t

All sources compute at the block's advanced clock: a source started at 0
with step size s writes its value for t = s on its first step.

Author: StreamSim Framework
Version: 1.0.0
"""

import math
from typing import Any, List, Sequence

from . import numeric
from .core_blocks import StreamBlock
from .stream import StreamBuffer


# =========================
# Constant Source
# =========================

class ConstantSource(StreamBlock):
    """
    Outputs a constant vector signal regardless of simulation time.

    The output width equals the number of values given. The block still
    advances its clock on every step, so it takes part in scheduling like
    any other source.

    Example:
        >>> ref = ConstantSource([1.0, 2.0, 3.0], name="reference")
        >>> ref.dim
        3
    """

    def __init__(self, values: Sequence[Any], name: str = "", **kwargs: Any) -> None:
        """
        Initialize a ConstantSource block.

        Args:
            values: Constant output values; one output slot per value.
            name:   Identifier for this block.
            **kwargs: step_size, start_time, time_type, value_type
                      (see StreamBlock).
        """
        self._values_seed: List[Any] = list(values)
        super().__init__(name, dim=len(self._values_seed), **kwargs)

    def _bind_parameters(self) -> None:
        self.values = [self.to_value(v) for v in self._values_seed]

    def compute(self, t: Any, stream: StreamBuffer) -> Sequence[Any]:
        return list(self.values)


# =========================
# Linear Source
# =========================

class LinearSource(StreamBlock):
    """
    Generates a linear ramp: ``output = slope * t + offset``.

    Attributes:
        slope: Rate of change per time unit (Value type once bound)
        offset: Output at t = 0 (Value type once bound)

    Example:
        >>> ramp = LinearSource(slope=1.0, offset=2.0, step_size=0.5,
        ...                     time_type=np.float64, value_type=np.float64)
        >>> ramp.set_output_region(0)
        >>> stream = StreamBuffer(np.float64); stream.allocate(1)
        0
        >>> ramp.step(stream)
        >>> stream[0]
        2.5
    """

    def __init__(self, slope: Any = 1, offset: Any = 0, name: str = "", **kwargs: Any) -> None:
        """
        Initialize a LinearSource block.

        Args:
            slope:  Rate of change per time unit. Default: 1
            offset: Value at t = 0. Default: 0
            name:   Identifier for this block.
            **kwargs: step_size, start_time, time_type, value_type
                      (see StreamBlock).
        """
        self._slope_seed = slope
        self._offset_seed = offset
        super().__init__(name, dim=1, **kwargs)

    def _bind_parameters(self) -> None:
        self.slope = self.to_value(self._slope_seed)
        self.offset = self.to_value(self._offset_seed)

    def compute(self, t: Any, stream: StreamBuffer) -> Sequence[Any]:
        return [self.slope * self.to_value(t) + self.offset]


# =========================
# Polynomial Source
# =========================

class PolynomialSource(StreamBlock):
    """
    Generates a polynomial of the block clock.

    ``output = c[0] + c[1]*t + c[2]*t**2 + ...``

    Powers are built by repeated multiplication in the Value type; no
    rounding correction is applied.

    Attributes:
        coefficients (list): Coefficients in ascending order of power

    Example:
        >>> # 2 + t
        >>> poly = PolynomialSource([2, 1], step_size=1)
        >>> # t**2
        >>> square = PolynomialSource([0, 0, 1])
    """

    def __init__(self, coefficients: Sequence[Any], name: str = "", **kwargs: Any) -> None:
        """
        Initialize a PolynomialSource block.

        Args:
            coefficients: Coefficients in ascending order of power. At least one.
            name:         Identifier for this block.
            **kwargs:     step_size, start_time, time_type, value_type
                          (see StreamBlock).

        Raises:
            ValueError: If no coefficients are given.
        """
        self._coefficients_seed: List[Any] = list(coefficients)
        if not self._coefficients_seed:
            raise ValueError(f"{name or type(self).__name__}: at least one coefficient is required")
        super().__init__(name, dim=1, **kwargs)

    def _bind_parameters(self) -> None:
        self.coefficients = [self.to_value(c) for c in self._coefficients_seed]

    def compute(self, t: Any, stream: StreamBuffer) -> Sequence[Any]:
        x = self.to_value(t)
        total = numeric.zero(self.value_type)
        for power, coefficient in enumerate(self.coefficients):
            total += coefficient * numeric.power(x, power, self.value_type)
        return [total]


# =========================
# Exponential Source
# =========================

class ExponentialSource(StreamBlock):
    """
    Generates an exponential of the block clock: ``output = base ** t``.

    Intended for floating and complex Value types; with integral Value types
    the clock is truncated before exponentiation.

    Example:
        >>> growth = ExponentialSource()           # e ** t
        >>> doubling = ExponentialSource(base=2.0)
    """

    def __init__(self, base: Any = math.e, name: str = "", **kwargs: Any) -> None:
        self._base_seed = base
        super().__init__(name, dim=1, **kwargs)

    def _bind_parameters(self) -> None:
        self.base = self.to_value(self._base_seed)

    def compute(self, t: Any, stream: StreamBuffer) -> Sequence[Any]:
        return [self.base ** self.to_value(t)]


# =========================
# Module Metadata
# =========================

__all__ = [
    'ConstantSource',
    'LinearSource',
    'PolynomialSource',
    'ExponentialSource',
]

__version__ = '1.0.0'
__author__ = 'StreamSim Framework'
