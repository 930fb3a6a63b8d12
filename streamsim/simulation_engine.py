"""
Minimum-Time Simulation Engine
==============================

Overview:
---------
StreamSim advances a graph of independently clocked blocks with a greedy
event scheduler. Every iteration it scans all registered blocks, picks the
one whose ``next_time()`` is smallest, moves the global clock to that time
and steps that single block. Nothing else happens in between: no
topological ordering, no integration, no interpolation.

Key Concepts:
-------------
1. **Block clocks**:
   - Every block owns its clock and step size; step sizes may differ.
   - A block steps only when it holds the globally earliest next time.

2. **Tie-break**:
   - The scan keeps the first minimal time it finds and only replaces it on
     a strictly smaller one, so among equal times the lowest registration
     index wins. Register producers before their consumers to have a
     consumer see its producers' values for the same tick.

3. **Stop policy**:
   - ``StopPolicy.INCLUSIVE`` (default): a tick exactly at ``stop_time`` is
     processed; the run ends when the earliest next time exceeds it.
   - ``StopPolicy.EXCLUSIVE``: the run ends when the earliest next time
     reaches ``stop_time``.
   - The check happens before stepping; no block is stepped past the boundary.

4. **Multi-rate reads**:
   - A block reads whatever the stream holds when it steps. If a producer
     runs at a different rate, the value read may belong to a different
     point in simulated time than the reader's own tick; before the
     producer's first step the reader sees zero. This is the model, not a
     race: there is exactly one writer at a time and no synchronisation.

Typical Workflow:
-----------------
1. Create a StreamSim with the Time and Value types.
2. ``register()`` blocks, then ``connect()`` them.
3. Optionally ``monitor(index)`` to record output histories.
4. ``run(stop_time)``; read results with ``outputs_of(index)``.

Author: StreamSim Framework
Version: 1.0.0
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from . import numeric
from .exceptions import NumericCastError, RunawaySimulationError
from .graph import BlockGraph

logger = logging.getLogger(__name__)


# =========================
# Run Configuration
# =========================

class StopPolicy:
    """
    Enumeration of run-loop stop conditions.

    Methods:
        INCLUSIVE: keep stepping while the earliest next time <= stop_time
        EXCLUSIVE: keep stepping while the earliest next time < stop_time

    Example:
        >>> sim = StreamSim(config=SimulationConfig(stop_policy=StopPolicy.EXCLUSIVE))
    """
    INCLUSIVE = 'inclusive'
    EXCLUSIVE = 'exclusive'


@dataclass
class SimulationConfig:
    """
    Run-loop settings for StreamSim.

    Attributes:
        stop_policy (str):      StopPolicy.INCLUSIVE or StopPolicy.EXCLUSIVE.
        max_steps (int):        Optional cap on block steps per run() call.
                                Exceeding it raises RunawaySimulationError.
        max_wall_time (float):  Optional wall-clock cap in seconds per run()
                                call, same behaviour.
        verbose (bool):         Print a configuration banner and a completion
                                line around each run.
    """
    stop_policy: str = StopPolicy.INCLUSIVE
    max_steps: Optional[int] = None
    max_wall_time: Optional[float] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.stop_policy not in (StopPolicy.INCLUSIVE, StopPolicy.EXCLUSIVE):
            raise ValueError(f"unknown stop policy {self.stop_policy!r}")
        if self.max_steps is not None and self.max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {self.max_steps}")
        if self.max_wall_time is not None and self.max_wall_time <= 0:
            raise ValueError(f"max_wall_time must be positive, got {self.max_wall_time}")


@dataclass
class SimulationStats:
    """
    Runtime statistics collected across run() calls.

    Attributes:
        total_steps (int):       Number of block steps executed.
        steps_per_block (dict):  Registration index -> number of steps.
        compute_time (float):    Wall-clock seconds spent in run().
        avg_step_time (float):   compute_time / total_steps.
        final_time:              Global clock after the last run().

    Example:
        >>> sim.run(10.0)
        >>> print(f"{sim.stats.total_steps} steps in {sim.stats.compute_time:.3f} s")
    """
    total_steps: int = 0
    steps_per_block: Dict[int, int] = field(default_factory=dict)
    compute_time: float = 0.0
    avg_step_time: float = 0.0
    final_time: Any = None


# =========================
# Output History Recorder
# =========================

class StreamScope:
    """
    Output-history recorder for monitored blocks.

    Register block indices before running. Every time the scheduler steps
    a monitored block, the scope stores the global clock and a copy of the
    block's output region. Because blocks step at their own rates, each
    label has its own time axis.

    Attributes:
        t (Dict[str, List]):              Sample times per label.
        data (Dict[str, List[np.ndarray]]): Output snapshots per label.
        monitored_blocks (Dict[int, str]): Block index -> label.

    Example:
        >>> sim.monitor(adder, label="sum")
        >>> sim.run(5.0)
        >>> sim.scope.get_signal("sum")        # -> np.ndarray of shape (N,)
        >>> sim.scope.get_times("sum")
    """

    def __init__(self) -> None:
        self.t: Dict[str, List[Any]] = {}
        self.data: Dict[str, List[np.ndarray]] = {}
        self.monitored_blocks: Dict[int, str] = {}

    def add(self, index: int, label: Optional[str] = None) -> str:
        """
        Monitor the block registered under ``index``.

        Args:
            index: Registration index of the block.
            label: Key used to retrieve the history. Default: ``"block_<index>"``.

        The index is not checked against any graph; use
        ``StreamSim.monitor()`` for that. An index that never steps records
        nothing.

        Returns:
            str: The label in use.
        """
        label = label if label else f"block_{index}"
        if label in self.monitored_blocks.values() and self.monitored_blocks.get(index) != label:
            raise ValueError(f"scope label {label!r} is already in use")
        self.monitored_blocks[index] = label
        return label

    def record(self, index: int, t: Any, values: Sequence[Any]) -> None:
        """
        Store one sample for block ``index``. Called by the engine after each step.

        Samples for blocks that are not monitored are ignored.
        """
        label = self.monitored_blocks.get(index)
        if label is None:
            return
        self.t.setdefault(label, []).append(t)
        self.data.setdefault(label, []).append(np.array(values, copy=True))

    def get_times(self, label: str) -> Optional[np.ndarray]:
        return np.array(self.t[label]) if label in self.t else None

    def get_signal(self, label: str, index: int = 0) -> Optional[np.ndarray]:
        """
        Recorded history of one output slot.

        Args:
            label: Label given to add().
            index: Output slot of the block (0-based).

        Returns:
            np.ndarray of shape (N,), or None if nothing was recorded.
        """
        full = self.get_full_signal(label)
        if full is None or index >= full.shape[1]:
            return None
        return full[:, index]

    def get_full_signal(self, label: str) -> Optional[np.ndarray]:
        """All output slots as an (N, dim) array, or None if nothing was recorded."""
        return np.array(self.data[label]) if label in self.data else None

    def clear(self) -> None:
        """Drop recorded samples; monitored blocks stay registered."""
        self.t.clear()
        self.data.clear()

    def __contains__(self, index: int) -> bool:
        return index in self.monitored_blocks

    def plot(self, title: str = "Simulation Results", figsize: Tuple[float, float] = (12, 6),
             signals: Optional[List[str]] = None, show: bool = True):
        """
        Plot recorded histories as step curves against simulation time.

        Each output slot of each label becomes one line named ``"label[i]"``.
        Complex values are plotted by their real part.

        Args:
            title:   Figure title.
            figsize: Matplotlib figure size (width, height) in inches.
            signals: Labels to plot. Default: all recorded labels.
            show:    Call ``plt.show()`` after drawing.

        Returns:
            The matplotlib Figure, or None if nothing was recorded.
        """
        labels = list(self.data) if signals is None else [s for s in signals if s in self.data]
        if not labels:
            logger.warning("No signals to plot. Use monitor(index) before running.")
            return None

        fig, ax = plt.subplots(figsize=figsize)
        for label in labels:
            times = self.get_times(label)
            full = np.real(self.get_full_signal(label))
            for i in range(full.shape[1]):
                ax.step(times, full[:, i], where='post', label=f"{label}[{i}]", linewidth=1.5)

        ax.set_xlabel("Time", fontsize=12)
        ax.set_ylabel("Amplitude", fontsize=12)
        ax.set_title(title, fontsize=14)
        ax.legend(loc='best', fontsize=10)
        ax.grid(True, alpha=0.3)
        fig.tight_layout()
        if show:
            plt.show()
        return fig


# =========================
# Simulation Engine
# =========================

class StreamSim(BlockGraph):
    """
    Block graph plus the minimum-next-time scheduler.

    Attributes:
        start_time:                 Initial value of the global clock.
        time:                       Global clock: the next time most recently
                                    selected by the scheduler.
        config (SimulationConfig):  Run-loop settings.
        scope (StreamScope):        Output-history recorder.
        stats (SimulationStats):    Populated by run().

    Example:
        >>> sim = StreamSim(time_type=np.float64, value_type=np.float64)
        >>> lin = sim.register(LinearSource(slope=1, offset=0, step_size=1))
        >>> poly = sim.register(PolynomialSource([0, 1], step_size=1))
        >>> add = sim.register(Summation(step_size=1))
        >>> sim.connect(lin, 0, add)
        >>> sim.connect(poly, 0, add)
        >>> sim.run(3)
        3.0
        >>> sim.outputs_of(add)
        array([6.])
    """

    def __init__(self, time_type: Any = numeric.DEFAULT_TIME_TYPE,
                 value_type: Any = numeric.DEFAULT_VALUE_TYPE,
                 start_time: Any = 0, config: Optional[SimulationConfig] = None) -> None:
        """
        Initialise an empty simulation.

        Args:
            time_type:  Time type shared by the global clock and every block.
            value_type: Value type of the stream buffer.
            start_time: Initial global clock. Default: 0
            config:     Run-loop settings. Default: SimulationConfig()

        Raises:
            UnsupportedNumericTypeError: If a type is not supported.
            NumericCastError:            If start_time does not fit time_type.
        """
        super().__init__(time_type, value_type)
        self.config: SimulationConfig = config if config is not None else SimulationConfig()
        self.start_time = numeric.cast(start_time, self.time_type)
        self.time = self.start_time
        self.scope = StreamScope()
        self.stats = SimulationStats()

    def _admit(self, block) -> None:
        if block.start_time < self.time:
            raise ValueError(
                f"{block.name}: start time {block.start_time} is before the simulation clock {self.time}"
            )

    def monitor(self, index: int, label: Optional[str] = None) -> str:
        """
        Record the output history of a registered block in ``scope``.

        Unlike ``scope.add()``, the index is checked against the graph.

        Raises:
            UnknownBlockError: If no block has that index.
        """
        self.block(index)
        return self.scope.add(index, label)

    def _select_next(self) -> Tuple[Optional[int], Any]:
        """
        Index and next time of the block to step; lowest index wins ties.

        Blocks whose next time lies outside the Time range are skipped.
        Returns ``(None, None)`` when no block can step any more.
        """
        index, min_time = None, None
        for i, block in enumerate(self.blocks):
            try:
                candidate = block.next_time()
            except NumericCastError:
                continue
            if min_time is None or candidate < min_time:
                index = i
                min_time = candidate
        return index, min_time

    def _past_stop(self, next_time: Any, stop_time: Any) -> bool:
        if self.config.stop_policy == StopPolicy.INCLUSIVE:
            return next_time > stop_time
        return next_time >= stop_time

    def run(self, stop_time: Any):
        """
        Step blocks in next-time order until ``stop_time`` is crossed.

        May be called again with a later ``stop_time`` to continue. The
        graph is frozen for wiring from the first call until ``reset()``.

        Args:
            stop_time: Simulation end time, cast into the Time type.

        Returns:
            The global clock reached. With no registered blocks, or a
            ``stop_time`` before the clock, the clock is returned unchanged.

        Raises:
            NumericCastError:       If stop_time does not fit the Time type.
            RunawaySimulationError: If max_steps or max_wall_time is exceeded.
        """
        stop = numeric.cast(stop_time, self.time_type)
        if not self.blocks:
            logger.warning("run() called on an empty graph; clock stays at %s", self.time)
            return self.time
        if stop < self.time:
            logger.warning("run(%s) is before the clock at %s; nothing to step", stop, self.time)
            return self.time

        self._frozen = True
        cfg = self.config
        if cfg.verbose:
            print(f"\n{'=' * 70}")
            print("StreamSim")
            print(f"{'=' * 70}")
            print(f"  Start time:     {self.time}")
            print(f"  Stop time:      {stop} ({cfg.stop_policy})")
            print(f"  Time type:      {np.dtype(self.time_type).name}")
            print(f"  Value type:     {np.dtype(self.value_type).name}")
            print(f"  Total blocks:   {len(self.blocks)}")
            print(f"  Stream size:    {len(self.stream)}")
            print(f"{'=' * 70}\n")

        logger.info("Running %d block(s) from t=%s to t=%s (%s)",
                    len(self.blocks), self.time, stop, cfg.stop_policy)
        steps = 0
        wall_start = time.perf_counter()

        while True:
            index, next_time = self._select_next()
            if index is None:
                logger.warning("every block clock has reached the end of the %s range at t=%s",
                               np.dtype(self.time_type).name, self.time)
                break
            if self._past_stop(next_time, stop):
                break
            if cfg.max_steps is not None and steps >= cfg.max_steps:
                raise RunawaySimulationError(
                    f"run exceeded max_steps={cfg.max_steps} at t={self.time}", steps, self.time)
            if cfg.max_wall_time is not None and time.perf_counter() - wall_start > cfg.max_wall_time:
                raise RunawaySimulationError(
                    f"run exceeded max_wall_time={cfg.max_wall_time}s at t={self.time}", steps, self.time)

            self.time = next_time
            block = self.blocks[index]
            block.step(self.stream)
            steps += 1
            self.stats.steps_per_block[index] = self.stats.steps_per_block.get(index, 0) + 1
            if index in self.scope:
                self.scope.record(index, self.time, self.outputs_of(index))
            logger.debug("t=%s stepped block %d (%s)", self.time, index, block.name)

        elapsed = time.perf_counter() - wall_start
        self.stats.total_steps += steps
        self.stats.compute_time += elapsed
        self.stats.avg_step_time = self.stats.compute_time / max(self.stats.total_steps, 1)
        self.stats.final_time = self.time

        logger.info("Run finished at t=%s after %d step(s) in %.3f s", self.time, steps, elapsed)
        if cfg.verbose:
            print(f"\n✓ Simulation complete: t={self.time}, {steps} step(s)\n")
        return self.time

    def reset(self) -> None:
        """
        Return the simulation to its pre-run state.

        Zeroes the stream, resets every block's clock and state, moves the
        global clock back to ``start_time``, clears recorded samples and
        statistics, and unfreezes the graph. Wiring is kept.
        """
        self.stream.reset()
        for block in self.blocks:
            block.reset()
        self.time = self.start_time
        self.scope.clear()
        self.stats = SimulationStats()
        self._frozen = False
        logger.debug("Simulation reset to t=%s", self.time)


# Export
__all__ = [
    'StopPolicy',
    'SimulationConfig',
    'SimulationStats',
    'StreamScope',
    'StreamSim',
]

__version__ = '1.0.0'
__author__ = 'StreamSim Framework'
