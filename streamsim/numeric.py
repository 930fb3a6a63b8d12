"""
numeric.py
==========

Numeric type layer for the stream simulation kernel.

Signal values and time bases are numpy scalar types. This module decides
which of them are usable as a *Value* (anything that flows through the
stream buffer) and which are usable as a *Time* (an ordered Value with a
default step size), and provides a checked cast between them.

Value types:
    int8, int16, int32, int64, uint8, uint16, uint32, uint64,
    float32, float64, complex64, complex128

Time types:
    int32, int64, uint32, uint64 (default step 1)
    float32, float64             (default step 0.1)

Python ``int``, ``float`` and ``complex`` are accepted anywhere a type is
expected and map to int64, float64 and complex128.

Functions:
    value_type:        Normalise and validate a Value type
    time_type:         Normalise and validate a Time type
    zero / one:        Identities of a Value type
    default_step_size: Default step of a Time type
    cast:              Checked cross-type cast, raises NumericCastError
    checked_add:       Addition that fails instead of wrapping
    power:             Integer power by repeated multiplication

Author: StreamSim Framework
Version: 1.0.0
"""

import math
import numbers
from typing import Any

import numpy as np

from .exceptions import NumericCastError, UnsupportedNumericTypeError


# =========================
# Supported Types
# =========================

VALUE_TYPES = (
    np.int8, np.int16, np.int32, np.int64,
    np.uint8, np.uint16, np.uint32, np.uint64,
    np.float32, np.float64,
    np.complex64, np.complex128,
)

# Time type -> default step size
TIME_TYPES = {
    np.int32: 1,
    np.int64: 1,
    np.uint32: 1,
    np.uint64: 1,
    np.float32: 0.1,
    np.float64: 0.1,
}

# Complex type -> type of its real and imaginary parts
_COMPLEX_PARTS = {
    np.complex64: np.float32,
    np.complex128: np.float64,
}

DEFAULT_TIME_TYPE = np.float64
DEFAULT_VALUE_TYPE = np.float64


# =========================
# Type Resolution
# =========================

def _scalar_type(kind: Any) -> type:
    if kind is None:
        raise UnsupportedNumericTypeError("numeric type must not be None")
    try:
        return np.dtype(kind).type
    except TypeError as exc:
        raise UnsupportedNumericTypeError(f"{kind!r} is not a numeric type") from exc


def value_type(kind: Any) -> type:
    """
    Resolve ``kind`` to a supported Value scalar type.

    Args:
        kind: A numpy scalar type, dtype, dtype string, or one of the
              Python builtins int / float / complex.

    Returns:
        The numpy scalar type (e.g. ``np.float64``).

    Raises:
        UnsupportedNumericTypeError: If ``kind`` is not a Value type.

    Example:
        >>> value_type(float)
        <class 'numpy.float64'>
        >>> value_type("complex64")
        <class 'numpy.complex64'>
    """
    scalar = _scalar_type(kind)
    if scalar not in VALUE_TYPES:
        raise UnsupportedNumericTypeError(f"{np.dtype(scalar).name} is not a supported value type")
    return scalar


def time_type(kind: Any) -> type:
    """
    Resolve ``kind`` to a supported Time scalar type.

    Time types must be totally ordered, so complex types are rejected.

    Raises:
        UnsupportedNumericTypeError: If ``kind`` is not a Time type.
    """
    scalar = _scalar_type(kind)
    if scalar not in TIME_TYPES:
        raise UnsupportedNumericTypeError(f"{np.dtype(scalar).name} is not a supported time type")
    return scalar


def is_time_type(kind: Any) -> bool:
    try:
        time_type(kind)
    except UnsupportedNumericTypeError:
        return False
    return True


def zero(kind: Any):
    """Additive identity of a Value type."""
    return value_type(kind)(0)


def one(kind: Any):
    """Multiplicative identity of a Value type."""
    return value_type(kind)(1)


def default_step_size(kind: Any):
    """
    Default block step size for a Time type.

    Integral time bases advance exactly one unit per step; floating time
    bases advance 0.1.

    Example:
        >>> default_step_size(np.uint32)
        1
        >>> default_step_size(np.float64)
        0.1
    """
    scalar = time_type(kind)
    return scalar(TIME_TYPES[scalar])


# =========================
# Checked Cast
# =========================

def _cast_real(real: Any, target: type, original: Any):
    if issubclass(target, np.integer):
        if isinstance(real, numbers.Integral):
            whole = int(real)
        else:
            as_float = float(real)
            if not math.isfinite(as_float):
                raise NumericCastError(original, target, "not a finite number")
            whole = int(as_float)  # truncates toward zero
        info = np.iinfo(target)
        if not info.min <= whole <= info.max:
            raise NumericCastError(original, target, f"out of range [{info.min}, {info.max}]")
        return target(whole)

    try:
        as_float = float(real)
    except OverflowError as exc:
        raise NumericCastError(original, target, "out of range") from exc
    limit = float(np.finfo(target).max)
    if math.isfinite(as_float) and abs(as_float) > limit:
        raise NumericCastError(original, target, f"magnitude exceeds {limit}")
    return target(as_float)


def cast(value: Any, kind: Any):
    """
    Cast ``value`` into the Value type ``kind``, failing instead of wrapping.

    Rules:
        - complex -> real: the imaginary part must be exactly zero
        - -> integer:      floats truncate toward zero; NaN, inf and values
                           outside the integer range fail
        - -> float:        finite values beyond the type's maximum fail;
                           NaN and inf are kept; precision loss is accepted
        - -> complex:      each component follows the float rules

    Args:
        value: Any Python or numpy number.
        kind:  Destination Value type.

    Returns:
        ``value`` as an instance of the destination numpy scalar type.

    Raises:
        NumericCastError: If the value is not representable in ``kind``.
        TypeError:        If ``value`` is not a number.

    Example:
        >>> cast(2.7, np.int32)
        2
        >>> cast(300, np.uint8)
        Traceback (most recent call last):
        ...
        NumericCastError: cannot cast 300 to uint8: out of range [0, 255]
    """
    target = value_type(kind)
    if not isinstance(value, numbers.Number):
        raise TypeError(f"cannot cast non-numeric value {value!r} to {target.__name__}")

    if isinstance(value, numbers.Real):
        real, imag = value, 0
    else:
        real, imag = value.real, value.imag

    if issubclass(target, np.complexfloating):
        part = _COMPLEX_PARTS[target]
        return target(complex(_cast_real(real, part, value), _cast_real(imag, part, value)))

    if imag != 0:
        raise NumericCastError(value, target, "non-zero imaginary part")
    return _cast_real(real, target, value)


def checked_add(a: Any, b: Any, kind: Any):
    """
    Add two values of type ``kind`` without wrapping or overflowing silently.

    Integer sums are computed exactly and cast back with ``cast()``; a
    floating sum of finite operands that overflows to infinity fails.

    Raises:
        NumericCastError: If the sum is not representable in ``kind``.

    Example:
        >>> checked_add(np.uint32(4294967294), np.uint32(1), np.uint32)
        4294967295
        >>> checked_add(np.uint32(4294967295), np.uint32(1), np.uint32)
        Traceback (most recent call last):
        ...
        NumericCastError: cannot cast 4294967296 to uint32: out of range [0, 4294967295]
    """
    target = value_type(kind)
    if issubclass(target, np.integer):
        return cast(int(a) + int(b), target)
    with np.errstate(over='ignore'):
        result = target(a) + target(b)
    if not np.isfinite(result) and np.isfinite(a) and np.isfinite(b):
        raise NumericCastError(result, target, "sum overflows")
    return result


def power(base: Any, exponent: int, kind: Any = None):
    """
    Raise ``base`` to a non-negative integer power by repeated multiplication.

    No rounding correction is applied beyond what the Value type's own
    multiplication does. ``power(x, 0)`` is ``one(kind)``.
    """
    if exponent < 0:
        raise ValueError(f"exponent must be non-negative, got {exponent}")
    result = one(type(base) if kind is None else kind)
    for _ in range(exponent):
        result = result * base
    return result


# =========================
# Module Metadata
# =========================

__all__ = [
    'VALUE_TYPES',
    'TIME_TYPES',
    'DEFAULT_TIME_TYPE',
    'DEFAULT_VALUE_TYPE',
    'value_type',
    'time_type',
    'is_time_type',
    'zero',
    'one',
    'default_step_size',
    'cast',
    'checked_add',
    'power',
]

__version__ = '1.0.0'
__author__ = 'StreamSim Framework'
