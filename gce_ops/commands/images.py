"""
GCE Ops - Image and Snapshot Commands

remove-image, remove-snapshot. Images and snapshots are global resources.
"""

from gce_ops.commands.base import ConcurrentCommand


class RemoveImageCommand(ConcurrentCommand):

    @property
    def name(self) -> str:
        return "remove-image"

    def process(self, image_name: str):
        self._log_call('images.delete', project=self.project, image=image_name)
        operation = self.compute.images().delete(
            project=self.project,
            image=image_name
        ).execute()

        self.tracker.add_global_operation(
            self.project, operation,
            on_success=lambda: self.context.emit({'name': image_name, 'status': 'DELETED'}),
            description=f"Delete image {image_name}")


class RemoveSnapshotCommand(ConcurrentCommand):

    @property
    def name(self) -> str:
        return "remove-snapshot"

    def process(self, snapshot_name: str):
        self._log_call('snapshots.delete', project=self.project, snapshot=snapshot_name)
        operation = self.compute.snapshots().delete(
            project=self.project,
            snapshot=snapshot_name
        ).execute()

        self.tracker.add_global_operation(
            self.project, operation,
            on_success=lambda: self.context.emit({'name': snapshot_name, 'status': 'DELETED'}),
            description=f"Delete snapshot {snapshot_name}")
