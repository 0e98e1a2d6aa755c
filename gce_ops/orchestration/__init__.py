"""
GCE Ops - Orchestration Module

Coordinates the operations of a command invocation.
"""

from gce_ops.orchestration.context import CommandContext
from gce_ops.orchestration.tracker import OperationTracker, DrainSummary
from gce_ops.orchestration.group_wait import wait_for_group_stable, group_is_stable

__all__ = [
    'CommandContext',
    'OperationTracker',
    'DrainSummary',
    'wait_for_group_stable',
    'group_is_stable'
]
