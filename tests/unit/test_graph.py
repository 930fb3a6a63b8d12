"""Unit tests for BlockGraph registration and wiring."""

import numpy as np
import pytest

from streamsim.exceptions import (BlockAlreadyRegisteredError, NumericCastError,
                                  UnknownBlockError, WiringOutOfRangeError)
from streamsim.graph import BlockGraph
from streamsim.processing_blocks import Gain, Summation
from streamsim.source_blocks import ConstantSource, LinearSource


def constant_of_width(dim):
    return ConstantSource([0.0] * dim)


class TestRegistration:
    """Tests for register() and output regions."""

    def test_indices_follow_registration_order(self):
        graph = BlockGraph()
        assert graph.register(LinearSource()) == 0
        assert graph.register(Summation()) == 1
        assert len(graph) == 2

    def test_regions_in_registration_order(self):
        graph = BlockGraph()
        for dim in (2, 1, 3):
            graph.register(constant_of_width(dim))
        assert [graph.output_region(i) for i in range(3)] == [(0, 2), (2, 3), (3, 6)]
        assert graph.total_dim == 6

    @pytest.mark.parametrize("dims", [
        [1],
        [3, 1, 4, 1, 5],
        [0, 2, 0, 1],
        [7, 7, 7],
    ])
    def test_regions_tile_the_stream(self, dims):
        graph = BlockGraph()
        for dim in dims:
            graph.register(constant_of_width(dim))

        covered = []
        expected_start = 0
        for i in range(len(dims)):
            start, stop = graph.output_region(i)
            assert start == expected_start
            covered.extend(range(start, stop))
            expected_start = stop
        assert covered == list(range(sum(dims)))
        assert len(set(covered)) == len(covered)
        assert graph.total_dim == sum(dims)

    def test_registration_binds_graph_types(self):
        graph = BlockGraph(time_type=np.uint32, value_type=np.int16)
        block = LinearSource(slope=2)
        graph.register(block)
        assert block.time_type is np.uint32
        assert block.value_type is np.int16
        assert block.step_size == 1

    def test_new_regions_are_zero(self):
        graph = BlockGraph()
        index = graph.register(constant_of_width(3))
        np.testing.assert_array_equal(graph.outputs_of(index), [0.0, 0.0, 0.0])

    def test_register_twice(self):
        graph = BlockGraph()
        block = LinearSource()
        graph.register(block)
        with pytest.raises(BlockAlreadyRegisteredError):
            graph.register(block)
        with pytest.raises(BlockAlreadyRegisteredError):
            BlockGraph().register(block)
        assert len(graph) == 1

    def test_failed_bind_leaves_graph_unchanged(self):
        graph = BlockGraph(time_type=np.uint32, value_type=np.int8)
        graph.register(LinearSource())
        with pytest.raises(NumericCastError):
            graph.register(LinearSource(slope=1000))
        assert len(graph) == 1
        assert graph.total_dim == 1

    def test_declared_type_mismatch(self):
        graph = BlockGraph(time_type=np.float64, value_type=np.float64)
        with pytest.raises(TypeError):
            graph.register(LinearSource(value_type=np.float32))
        assert len(graph) == 0
        assert graph.total_dim == 0


class TestConnect:
    """Tests for connect()."""

    def test_connect_records_absolute_offset(self):
        graph = BlockGraph()
        src = graph.register(constant_of_width(3))
        gain = graph.register(Gain(2.0))
        adder = graph.register(Summation())
        graph.connect(src, 2, adder)
        graph.connect(gain, 0, adder)
        assert graph.block(adder).inputs == (2, 3)

    def test_self_loop_is_allowed(self):
        graph = BlockGraph()
        adder = graph.register(Summation())
        graph.connect(adder, 0, adder)
        assert graph.block(adder).inputs == (0,)

    @pytest.mark.parametrize("slot", [2, 3, -1])
    def test_slot_out_of_range(self, slot):
        graph = BlockGraph()
        src = graph.register(constant_of_width(2))
        adder = graph.register(Summation())
        with pytest.raises(WiringOutOfRangeError) as excinfo:
            graph.connect(src, slot, adder)
        assert excinfo.value.dim == 2
        assert excinfo.value.slot == slot
        assert graph.block(adder).inputs == ()

    def test_out_of_range_is_index_error(self):
        graph = BlockGraph()
        src = graph.register(LinearSource())
        with pytest.raises(IndexError):
            graph.connect(src, 1, src)

    def test_graph_usable_after_wiring_error(self):
        graph = BlockGraph()
        src = graph.register(LinearSource())
        adder = graph.register(Summation())
        with pytest.raises(WiringOutOfRangeError):
            graph.connect(src, 5, adder)
        graph.connect(src, 0, adder)
        assert graph.block(adder).inputs == (0,)

    @pytest.mark.parametrize("producer,consumer", [(5, 0), (0, 5), (-1, 0), (0, "1")])
    def test_unknown_blocks(self, producer, consumer):
        graph = BlockGraph()
        graph.register(LinearSource())
        with pytest.raises(UnknownBlockError):
            graph.connect(producer, 0, consumer)


class TestQueries:
    """Tests for outputs_of() and display."""

    def test_outputs_of_is_a_snapshot(self):
        graph = BlockGraph()
        index = graph.register(LinearSource())
        snapshot = graph.outputs_of(index)
        snapshot[0] = 42.0
        assert graph.outputs_of(index)[0] == 0.0

    def test_outputs_of_unknown(self):
        with pytest.raises(UnknownBlockError):
            BlockGraph().outputs_of(0)

    def test_print_topology(self, capsys):
        graph = BlockGraph()
        src = graph.register(LinearSource(name="ramp"))
        adder = graph.register(Summation(name="adder"))
        graph.connect(src, 0, adder)
        graph.print_topology()
        out = capsys.readouterr().out
        assert "STREAM GRAPH TOPOLOGY" in out
        assert "ramp" in out
        assert "adder" in out
        assert "<- [0]" in out
