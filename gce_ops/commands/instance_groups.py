"""
GCE Ops - Managed Instance Group Commands

resize-instance-group, wait-instance-group. Zonal managed instance groups.
"""

from gce_ops.commands.base import ConcurrentCommand, ReadCommand
from gce_ops.orchestration.group_wait import wait_for_group_stable


class ResizeInstanceGroupCommand(ConcurrentCommand):
    """
    Sets the target size of managed instance groups.

    The resize operation completes when the new size is recorded, not when
    the instances exist; use wait-instance-group for that.
    """

    def __init__(self, *args, size: int, **kwargs):
        super().__init__(*args, **kwargs)
        self.size = size

    @property
    def name(self) -> str:
        return "resize-instance-group"

    def process(self, group_name: str):
        zone = self.require_zone()
        self._log_call('instanceGroupManagers.resize', project=self.project,
                       zone=zone, instanceGroupManager=group_name, size=self.size)
        operation = self.compute.instanceGroupManagers().resize(
            project=self.project,
            zone=zone,
            instanceGroupManager=group_name,
            size=self.size
        ).execute()

        def on_success():
            group = self.compute.instanceGroupManagers().get(
                project=self.project,
                zone=zone,
                instanceGroupManager=group_name
            ).execute()
            self.context.emit(group)

        self.tracker.add_zone_operation(
            self.project, zone, operation, on_success,
            description=f"Resize instance group {group_name} to {self.size}")


class WaitInstanceGroupCommand(ReadCommand):
    """
    Blocks until each group has no instance with a pending action.

    Emits {'name', 'zone', 'stable'}; a timeout is logged as a warning and
    reported as stable=False rather than raised.
    """

    def __init__(self, *args, timeout: float = None, sleep=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.timeout = timeout if timeout is not None else self.config.group_wait_timeout
        self._sleep = sleep

    @property
    def name(self) -> str:
        return "wait-instance-group"

    def process(self, group_name: str):
        zone = self.require_zone()
        stable = wait_for_group_stable(
            self.compute, self.project, zone, group_name,
            stop=self.context.stop,
            timeout=self.timeout,
            config=self.config.wait,
            logger=self.logger,
            sleep=self._sleep
        )

        if not self.context.stopping:
            self.context.emit({'name': group_name, 'zone': zone, 'stable': stable})
