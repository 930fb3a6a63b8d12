"""
ramp_sum.py
===========
StreamSim example: Ramp + Polynomial Summation, Single and Multi-Rate

Demonstrates:
  1. LinearSource      : y(t) = slope · t + offset
  2. PolynomialSource  : y(t) = c0 + c1·t + c2·t² + ...
  3. Summation         : sum of all wired inputs
  4. StreamSim         : minimum-next-time scheduler
  5. StreamScope       : per-block output history and plotting

Block diagram:

 [ramp (LinearSource)] ─────────►┐
                                 │[adder (Summation)]
 [identity (PolynomialSource)] ─►┘

Expected result (all step sizes 1, stop time 3, inclusive stop):
  ramp(3) = 3,  identity(3) = 3,  adder(3) = 6

The multi-rate run clocks the polynomial at step 2, so the adder reads a
value that is up to one polynomial step old:
  adder history at t = 1, 2, 3, 4, 5, 6  ->  1, 4, 5, 8, 9, 12

Run:
    python ramp_sum.py
"""

import logging

import numpy as np

from streamsim import (LinearSource, PolynomialSource, SimulationConfig,
                       StreamSim, Summation, setup_logging)


# =============================================================================
# Simulation parameters
# =============================================================================
T_STOP     = 3.0     # stop time of the reference run
T_STOP_MR  = 6.0     # stop time of the multi-rate run
SLOW_STEP  = 2.0     # step size of the slow polynomial source


# =============================================================================
# Builders
# =============================================================================
def build(poly_step=1.0, verbose=False):
    sim = StreamSim(time_type=np.float64, value_type=np.float64,
                    config=SimulationConfig(verbose=verbose))
    ramp     = sim.register(LinearSource(slope=1, offset=0, step_size=1, name="ramp"))
    identity = sim.register(PolynomialSource([0, 1], step_size=poly_step, name="identity"))
    adder    = sim.register(Summation(step_size=1, name="adder"))
    sim.connect(ramp, 0, adder)
    sim.connect(identity, 0, adder)

    sim.monitor(ramp, label="ramp")
    sim.monitor(identity, label="identity")
    sim.monitor(adder, label="adder")
    return sim, adder


# =============================================================================
# Main
# =============================================================================
if __name__ == "__main__":
    setup_logging(level=logging.INFO)

    # Reference run
    sim, adder = build(verbose=True)
    sim.print_topology()
    t_end = sim.run(T_STOP)
    print(f"t = {t_end}:  adder = {sim.outputs_of(adder)[0]}")
    print(f"{sim.stats.total_steps} steps, {sim.stats.steps_per_block}")

    # Multi-rate run
    sim_mr, adder_mr = build(poly_step=SLOW_STEP)
    sim_mr.run(T_STOP_MR)
    print("\nMulti-rate adder history:")
    for t, y in zip(sim_mr.scope.get_times("adder"), sim_mr.scope.get_signal("adder")):
        print(f"  t = {t:4.1f}   adder = {y:5.1f}")

    sim_mr.scope.plot(title="Ramp + Polynomial (polynomial at step 2)")
