"""
GCE Ops - Instance Commands

get-instance, remove-instance, start-instance, stop-instance, restart-instance.
All instance operations are zonal.
"""

from googleapiclient.errors import HttpError

from gce_ops.commands.base import ConcurrentCommand, ReadCommand


class GetInstanceCommand(ReadCommand):
    """
    Emits the instance resource for each name.

    Example:
        GetInstanceCommand(compute, project, context, zone='us-central1-a').run(['my-vm'])
    """

    @property
    def name(self) -> str:
        return "get-instance"

    def process(self, instance_name: str):
        zone = self.require_zone()
        self._log_call('instances.get', project=self.project, zone=zone,
                       instance=instance_name)
        try:
            instance = self.compute.instances().get(
                project=self.project,
                zone=zone,
                instance=instance_name
            ).execute()
        except HttpError as e:
            raise self.not_found(e, 'Instance', instance_name, f'zone {zone}')
        self.context.emit(instance)


class RemoveInstanceCommand(ConcurrentCommand):
    """
    Deletes instances.

    Emits {'name', 'zone', 'status': 'DELETED'} for every instance
    whose deletion completed.
    """

    @property
    def name(self) -> str:
        return "remove-instance"

    def process(self, instance_name: str):
        zone = self.require_zone()
        self._log_call('instances.delete', project=self.project, zone=zone,
                       instance=instance_name)
        operation = self.compute.instances().delete(
            project=self.project,
            zone=zone,
            instance=instance_name
        ).execute()

        def on_success():
            self.context.emit({
                'name': instance_name,
                'zone': zone,
                'status': 'DELETED'
            })

        self.tracker.add_zone_operation(
            self.project, zone, operation, on_success,
            description=f"Delete instance {instance_name}")


class _InstanceActionCommand(ConcurrentCommand):
    """
    Runs an instance action (start/stop/reset) and emits the
    refreshed instance once it completes.
    """

    action = None
    verb = None

    def process(self, instance_name: str):
        zone = self.require_zone()
        self._log_call(f'instances.{self.action}', project=self.project, zone=zone,
                       instance=instance_name)
        request = getattr(self.compute.instances(), self.action)
        operation = request(
            project=self.project,
            zone=zone,
            instance=instance_name
        ).execute()

        def on_success():
            instance = self.compute.instances().get(
                project=self.project,
                zone=zone,
                instance=instance_name
            ).execute()
            self.context.emit(instance)

        self.tracker.add_zone_operation(
            self.project, zone, operation, on_success,
            description=f"{self.verb} instance {instance_name}")


class StartInstanceCommand(_InstanceActionCommand):
    action = 'start'
    verb = 'Start'

    @property
    def name(self) -> str:
        return "start-instance"


class StopInstanceCommand(_InstanceActionCommand):
    action = 'stop'
    verb = 'Stop'

    @property
    def name(self) -> str:
        return "stop-instance"


class RestartInstanceCommand(_InstanceActionCommand):
    action = 'reset'
    verb = 'Restart'

    @property
    def name(self) -> str:
        return "restart-instance"
