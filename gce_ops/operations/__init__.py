"""
GCE Ops - Operations Module

Long-running operation handles and the waiter that polls them.

Usage:
    from gce_ops.operations import OperationHandle, OperationWaiter, ZoneScope

    operation = compute.instances().delete(
        project=project, zone=zone, instance='my-vm').execute()
    handle = OperationHandle(ZoneScope(project, zone), operation)

    result = OperationWaiter(compute).wait_until_terminal(handle.scope, handle)
    if result.failed:
        print(result.error)
"""

from gce_ops.operations.scope import (
    Scope,
    GlobalScope,
    RegionScope,
    ZoneScope,
    name_from_url,
    scope_from_operation
)
from gce_ops.operations.handle import OperationHandle
from gce_ops.operations.waiter import (
    OperationWaiter,
    StopSignal,
    WaitOutcome,
    WaitResult,
    operation_errors
)

__all__ = [
    # Scopes
    'Scope',
    'GlobalScope',
    'RegionScope',
    'ZoneScope',
    'name_from_url',
    'scope_from_operation',

    # Handles and waiting
    'OperationHandle',
    'OperationWaiter',
    'StopSignal',
    'WaitOutcome',
    'WaitResult',
    'operation_errors',
]
