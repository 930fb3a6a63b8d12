"""Unit tests for the numeric type layer."""

import math

import numpy as np
import pytest

from streamsim.exceptions import NumericCastError, UnsupportedNumericTypeError
from streamsim.numeric import (cast, checked_add, default_step_size, is_time_type, one,
                               power, time_type, value_type, zero)


class TestTypeResolution:
    """Tests for value_type / time_type."""

    def test_python_builtins_map_to_numpy(self):
        assert value_type(float) is np.float64
        assert value_type(complex) is np.complex128

    def test_dtype_strings(self):
        assert value_type("complex64") is np.complex64
        assert value_type(np.dtype("uint16")) is np.uint16

    @pytest.mark.parametrize("kind", [bool, str, None, "not-a-type", object])
    def test_unsupported_value_types(self, kind):
        with pytest.raises(UnsupportedNumericTypeError):
            value_type(kind)

    def test_unsupported_error_is_type_error(self):
        with pytest.raises(TypeError):
            value_type(bool)

    def test_time_types(self):
        assert time_type(np.uint32) is np.uint32
        assert time_type(float) is np.float64
        assert is_time_type(np.int64)

    @pytest.mark.parametrize("kind", [np.complex128, np.complex64, np.int8, np.uint16])
    def test_rejected_time_types(self, kind):
        assert not is_time_type(kind)
        with pytest.raises(UnsupportedNumericTypeError):
            time_type(kind)


class TestIdentitiesAndSteps:
    """Tests for zero, one and default_step_size."""

    def test_zero_and_one(self):
        assert zero(np.int16) == 0 and type(zero(np.int16)) is np.int16
        assert one(np.complex64) == 1 + 0j and type(one(np.complex64)) is np.complex64

    def test_integral_time_steps_one_unit(self):
        step = default_step_size(np.uint32)
        assert step == 1
        assert type(step) is np.uint32

    def test_floating_time_steps_finer(self):
        assert default_step_size(np.float64) == 0.1
        assert default_step_size(np.float32) == np.float32(0.1)
        assert default_step_size(np.float64) < default_step_size(np.int64)


class TestCast:
    """Tests for the checked cast."""

    def test_float_to_int_truncates_toward_zero(self):
        assert cast(2.7, np.int32) == 2
        assert cast(-2.7, np.int32) == -2
        assert type(cast(2.7, np.int32)) is np.int32

    def test_int_out_of_range(self):
        with pytest.raises(NumericCastError) as excinfo:
            cast(300, np.int8)
        assert excinfo.value.target is np.int8
        assert excinfo.value.value == 300

    def test_negative_to_unsigned(self):
        with pytest.raises(NumericCastError):
            cast(-1, np.uint8)

    def test_numpy_scalar_range(self):
        with pytest.raises(NumericCastError):
            cast(np.uint64(2**64 - 1), np.int64)
        assert cast(np.int64(5), np.uint8) == 5

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), -float("inf")])
    def test_non_finite_to_int(self, bad):
        with pytest.raises(NumericCastError):
            cast(bad, np.int64)

    def test_float_overflow(self):
        with pytest.raises(NumericCastError):
            cast(1e39, np.float32)
        with pytest.raises(NumericCastError):
            cast(10**400, np.float64)

    def test_float_specials_pass_through(self):
        assert math.isinf(cast(float("inf"), np.float32))
        assert math.isnan(cast(float("nan"), np.float64))

    def test_large_int_to_float_is_lossy_but_allowed(self):
        assert cast(2**70, np.float64) == float(2**70)

    def test_complex_to_real(self):
        assert cast(3 + 0j, np.float64) == 3.0
        with pytest.raises(NumericCastError):
            cast(3 + 1j, np.float64)

    def test_real_to_complex(self):
        result = cast(2, np.complex64)
        assert type(result) is np.complex64
        assert result == 2 + 0j

    def test_complex_component_overflow(self):
        with pytest.raises(NumericCastError):
            cast(np.complex128(1e300 + 1j), np.complex64)

    def test_cast_error_is_value_error(self):
        with pytest.raises(ValueError):
            cast(300, np.uint8)

    def test_non_numeric(self):
        with pytest.raises(TypeError):
            cast("3", np.float64)


class TestPower:
    """Tests for repeated-multiplication power."""

    def test_power(self):
        assert power(np.float64(2.0), 3) == 8.0
        assert power(np.int32(7), 0) == 1

    def test_power_keeps_value_type(self):
        assert type(power(np.float32(1.5), 2, np.float32)) is np.float32

    def test_negative_exponent(self):
        with pytest.raises(ValueError):
            power(2, -1)


class TestCheckedAdd:
    """Tests for addition that refuses to wrap."""

    def test_integer_sum(self):
        result = checked_add(np.uint32(4), np.uint32(3), np.uint32)
        assert result == 7
        assert type(result) is np.uint32

    def test_integer_sum_at_max(self):
        top = np.iinfo(np.uint32).max
        assert checked_add(np.uint32(top - 1), np.uint32(1), np.uint32) == top

    @pytest.mark.parametrize("kind", [np.int32, np.int64, np.uint32, np.uint64])
    def test_integer_overflow(self, kind):
        top = np.iinfo(kind).max
        with pytest.raises(NumericCastError):
            checked_add(kind(top), kind(1), kind)

    def test_float_sum(self):
        assert checked_add(np.float64(0.5), np.float64(0.25), np.float64) == 0.75

    def test_float_overflow(self):
        big = np.finfo(np.float32).max
        with pytest.raises(NumericCastError):
            checked_add(np.float32(big), np.float32(big), np.float32)

    def test_infinite_operand_passes_through(self):
        assert checked_add(np.float64(np.inf), np.float64(1.0), np.float64) == np.inf
