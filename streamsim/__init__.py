# StreamSim: Multi-Rate Block-Diagram Simulation Kernel
# Independently clocked blocks share one flat stream buffer and are stepped
# by a scheduler that always advances the block with the earliest next time.
#
# Usage:
#   from streamsim import StreamSim, LinearSource, PolynomialSource, Summation
#
# Numeric types:
#   Time and Value types are numpy scalar types. Both default to float64;
#   pass time_type / value_type to StreamSim to change them.

from .exceptions import *
from .numeric import *
from .stream import *
from .core_blocks import *
from .source_blocks import *
from .processing_blocks import *
from .graph import *
from .simulation_engine import *
from .logging_config import setup_logging, get_logger

__version__ = '1.0.0'
__author__ = 'StreamSim Framework'
