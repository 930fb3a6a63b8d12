"""Unit tests for StreamBuffer."""

import numpy as np
import pytest

from streamsim.stream import StreamBuffer


class TestStreamBuffer:
    """Tests for StreamBuffer."""

    def test_creation(self):
        stream = StreamBuffer(np.int32)
        assert stream.dtype is np.int32
        assert len(stream) == 0

    def test_allocate_returns_consecutive_offsets(self):
        stream = StreamBuffer()
        assert stream.allocate(2) == 0
        assert stream.allocate(1) == 2
        assert stream.allocate(0) == 3
        assert stream.allocate(4) == 3
        assert len(stream) == 7

    def test_new_slots_are_zero(self):
        stream = StreamBuffer(np.complex128)
        stream.allocate(3)
        assert np.all(stream.values == 0)
        assert stream.values.dtype == np.complex128

    def test_growth_keeps_existing_values(self):
        stream = StreamBuffer()
        stream.allocate(2)
        stream.write(0, [1.5, 2.5])
        stream.allocate(2)
        np.testing.assert_array_equal(stream.values, [1.5, 2.5, 0.0, 0.0])

    def test_write_and_region(self):
        stream = StreamBuffer()
        stream.allocate(4)
        stream.write(1, [7.0, 8.0])
        np.testing.assert_array_equal(stream.region(1, 2), [7.0, 8.0])
        assert stream[2] == 8.0

    def test_region_is_a_copy(self):
        stream = StreamBuffer()
        stream.allocate(2)
        snapshot = stream.region(0, 2)
        snapshot[0] = 99.0
        assert stream[0] == 0.0

    def test_write_outside_buffer(self):
        stream = StreamBuffer()
        stream.allocate(2)
        with pytest.raises(IndexError):
            stream.write(1, [1.0, 2.0])
        with pytest.raises(IndexError):
            stream.region(-1, 1)

    def test_values_view_is_read_only(self):
        stream = StreamBuffer()
        stream.allocate(1)
        with pytest.raises(ValueError):
            stream.values[0] = 1.0

    def test_reset_zeroes_without_shrinking(self):
        stream = StreamBuffer()
        stream.allocate(3)
        stream.write(0, [1.0, 2.0, 3.0])
        stream.reset()
        assert len(stream) == 3
        assert np.all(stream.values == 0)

    def test_negative_allocation(self):
        with pytest.raises(ValueError):
            StreamBuffer().allocate(-1)
