"""slotflow: typed dataflow graphs of single-shot modules.

Main components:
* `Module`: unit of work with named, typed input and output slots
* `ModuleGraph`: modules wired output-slot → input-slot
* `GraphProcessor`: execute, copy or validate a graph
* `GraphRecurser`: the parents-first traversal the processor is built on
"""

# Version info
__version__ = "0.1.0"

# Core components
from slotflow.core.slot import Slot, InputSlot, OutputSlot
from slotflow.core.link import SlotLink
from slotflow.core.module import Module
from slotflow.core.graph import ModuleGraph
from slotflow.core.recurser import GraphRecurser
from slotflow.core.processor import GraphProcessor
from slotflow.core.cancellation import CancellationToken, CancellationSource
from slotflow.core.validation import (
    ValidationIssue,
    EmptyGraph,
    CircularReference,
    UnlinkedInput,
    UnlinkedOutput,
)
from slotflow.core.errors import (
    SlotflowError,
    GraphStructureError,
    CircularDependencyError,
    UnassignedInputError,
    ProcessingCancelledError,
    ProcessorClosedError,
)

# Configuration
from slotflow.config import ProcessorSettings, load_settings

# Utility re-exports
from slotflow.utils.logging import LogLevel, NullLogger, StdlibLogger, MemoryLogger
from slotflow.utils.metrics import NullMetricSink, EventMetricSink, MemoryMetricSink

# Export all important symbols
__all__ = [
    # Core classes
    "Slot",
    "InputSlot",
    "OutputSlot",
    "SlotLink",
    "Module",
    "ModuleGraph",
    "GraphRecurser",
    "GraphProcessor",
    "CancellationToken",
    "CancellationSource",

    # Validation issues
    "ValidationIssue",
    "EmptyGraph",
    "CircularReference",
    "UnlinkedInput",
    "UnlinkedOutput",

    # Errors
    "SlotflowError",
    "GraphStructureError",
    "CircularDependencyError",
    "UnassignedInputError",
    "ProcessingCancelledError",
    "ProcessorClosedError",

    # Config
    "ProcessorSettings",
    "load_settings",

    # Logger / metric sinks
    "LogLevel",
    "NullLogger",
    "StdlibLogger",
    "MemoryLogger",
    "NullMetricSink",
    "EventMetricSink",
    "MemoryMetricSink",
]
