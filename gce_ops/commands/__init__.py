"""
GCE Ops - Commands Module

Verb-noun command handlers. Mutating commands wait on their operations
as a batch at the end of the invocation; read commands fail fast.

Usage:
    from gce_ops.commands import RemoveInstanceCommand

    command = RemoveInstanceCommand(compute, project, context, zone='us-central1-a')
    command.run(['vm-1', 'vm-2', 'vm-3'])
"""

from gce_ops.commands.base import BaseCommand, ReadCommand, ConcurrentCommand
from gce_ops.commands.instances import (
    GetInstanceCommand,
    RemoveInstanceCommand,
    StartInstanceCommand,
    StopInstanceCommand,
    RestartInstanceCommand
)
from gce_ops.commands.disks import GetDiskCommand, RemoveDiskCommand, ResizeDiskCommand
from gce_ops.commands.images import RemoveImageCommand, RemoveSnapshotCommand
from gce_ops.commands.target_pools import (
    AddTargetPoolInstanceCommand,
    RemoveTargetPoolInstanceCommand
)
from gce_ops.commands.instance_groups import (
    ResizeInstanceGroupCommand,
    WaitInstanceGroupCommand
)

# Command name -> class
COMMANDS = {
    "get-instance": GetInstanceCommand,
    "remove-instance": RemoveInstanceCommand,
    "start-instance": StartInstanceCommand,
    "stop-instance": StopInstanceCommand,
    "restart-instance": RestartInstanceCommand,
    "get-disk": GetDiskCommand,
    "remove-disk": RemoveDiskCommand,
    "resize-disk": ResizeDiskCommand,
    "remove-image": RemoveImageCommand,
    "remove-snapshot": RemoveSnapshotCommand,
    "add-target-pool-instance": AddTargetPoolInstanceCommand,
    "remove-target-pool-instance": RemoveTargetPoolInstanceCommand,
    "resize-instance-group": ResizeInstanceGroupCommand,
    "wait-instance-group": WaitInstanceGroupCommand,
}

__all__ = [
    # Base classes
    'BaseCommand',
    'ReadCommand',
    'ConcurrentCommand',

    # Commands
    'GetInstanceCommand',
    'RemoveInstanceCommand',
    'StartInstanceCommand',
    'StopInstanceCommand',
    'RestartInstanceCommand',
    'GetDiskCommand',
    'RemoveDiskCommand',
    'ResizeDiskCommand',
    'RemoveImageCommand',
    'RemoveSnapshotCommand',
    'AddTargetPoolInstanceCommand',
    'RemoveTargetPoolInstanceCommand',
    'ResizeInstanceGroupCommand',
    'WaitInstanceGroupCommand',

    'COMMANDS',
]
