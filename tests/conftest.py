"""
Pytest configuration and shared fixtures.
"""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest


@pytest.fixture
def sim():
    """Empty float64/float64 simulation."""
    from streamsim import StreamSim
    return StreamSim(time_type=np.float64, value_type=np.float64)


@pytest.fixture
def int_sim():
    """Empty simulation with an integral time base."""
    from streamsim import StreamSim
    return StreamSim(time_type=np.uint32, value_type=np.int64)


@pytest.fixture
def attach():
    """Give a standalone block an output region at the end of a stream."""
    def _attach(block, stream):
        block.set_output_region(stream.allocate(block.dim))
        return block
    return _attach


@pytest.fixture
def ramp_sum():
    """
    Factory for the reference scenario: identity ramp + identity polynomial
    summed, all with step size 1. Returns (sim, indices).
    """
    from streamsim import (LinearSource, PolynomialSource, SimulationConfig,
                           StreamSim, Summation)

    def _build(stop_policy="inclusive", time_type=np.float64, value_type=np.float64):
        sim = StreamSim(time_type=time_type, value_type=value_type,
                        config=SimulationConfig(stop_policy=stop_policy))
        lin = sim.register(LinearSource(slope=1, offset=0, step_size=1, name="ramp"))
        poly = sim.register(PolynomialSource([0, 1], step_size=1, name="identity"))
        add = sim.register(Summation(step_size=1, name="adder"))
        sim.connect(lin, 0, add)
        sim.connect(poly, 0, add)
        return sim, (lin, poly, add)

    return _build
