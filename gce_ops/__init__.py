"""GCE Ops - Batch Google Compute Engine operations.

Mutating Compute Engine calls return an Operation immediately; the real
outcome is only known once the operation is DONE. GCE Ops starts the
operations for a whole batch of inputs, then waits on all of them, runs
completion handlers, and reports every failure at the end.

Example usage:
    >>> from gce_ops import run_command
    >>> run_command('remove-instance', ['vm-1', 'vm-2'],
    ...             project='my-project', zone='us-central1-a')
"""

__version__ = "0.3.0"

from gce_ops.core.exceptions import (
    GCEOpsError,
    OperationFailedError,
    AggregateOperationError,
    CallbackFailedError
)
from gce_ops.operations import (
    OperationHandle,
    OperationWaiter,
    StopSignal,
    GlobalScope,
    RegionScope,
    ZoneScope
)
from gce_ops.orchestration import OperationTracker, CommandContext
from gce_ops.main import run_command

__all__ = [
    'GCEOpsError',
    'OperationFailedError',
    'AggregateOperationError',
    'CallbackFailedError',
    'OperationHandle',
    'OperationWaiter',
    'StopSignal',
    'GlobalScope',
    'RegionScope',
    'ZoneScope',
    'OperationTracker',
    'CommandContext',
    'run_command',
]
