"""
GCE Ops - Disk Commands

get-disk, remove-disk, resize-disk. Disk operations are zonal.
"""

from googleapiclient.errors import HttpError

from gce_ops.commands.base import ConcurrentCommand, ReadCommand


class GetDiskCommand(ReadCommand):

    @property
    def name(self) -> str:
        return "get-disk"

    def process(self, disk_name: str):
        zone = self.require_zone()
        self._log_call('disks.get', project=self.project, zone=zone, disk=disk_name)
        try:
            disk = self.compute.disks().get(
                project=self.project,
                zone=zone,
                disk=disk_name
            ).execute()
        except HttpError as e:
            raise self.not_found(e, 'Disk', disk_name, f'zone {zone}')
        self.context.emit(disk)


class RemoveDiskCommand(ConcurrentCommand):
    """
    Deletes disks.

    WARNING: Deletion cannot be undone.
    """

    @property
    def name(self) -> str:
        return "remove-disk"

    def process(self, disk_name: str):
        zone = self.require_zone()
        self._log_call('disks.delete', project=self.project, zone=zone, disk=disk_name)
        operation = self.compute.disks().delete(
            project=self.project,
            zone=zone,
            disk=disk_name
        ).execute()

        def on_success():
            self.context.emit({
                'name': disk_name,
                'zone': zone,
                'status': 'DELETED'
            })

        self.tracker.add_zone_operation(
            self.project, zone, operation, on_success,
            description=f"Delete disk {disk_name}")


class ResizeDiskCommand(ConcurrentCommand):
    """
    Grows disks to size_gb and emits the refreshed disk.

    Compute only allows growing a disk; a smaller size fails the operation.
    """

    def __init__(self, *args, size_gb: int, **kwargs):
        super().__init__(*args, **kwargs)
        self.size_gb = size_gb

    @property
    def name(self) -> str:
        return "resize-disk"

    def process(self, disk_name: str):
        zone = self.require_zone()
        self._log_call('disks.resize', project=self.project, zone=zone,
                       disk=disk_name, sizeGb=self.size_gb)
        operation = self.compute.disks().resize(
            project=self.project,
            zone=zone,
            disk=disk_name,
            body={'sizeGb': str(self.size_gb)}
        ).execute()

        def on_success():
            disk = self.compute.disks().get(
                project=self.project,
                zone=zone,
                disk=disk_name
            ).execute()
            self.context.emit(disk)

        self.tracker.add_zone_operation(
            self.project, zone, operation, on_success,
            description=f"Resize disk {disk_name} to {self.size_gb}GB")
