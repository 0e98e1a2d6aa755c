"""
GCE Ops - Target Pool Commands

add-target-pool-instance, remove-target-pool-instance.
Target pools are regional; the refreshed pool is emitted on success.
"""

from typing import List

from gce_ops.commands.base import ConcurrentCommand


class _TargetPoolMembershipCommand(ConcurrentCommand):

    action = None
    body_key = None
    verb = None

    def __init__(self, *args, instances: List[str], **kwargs):
        """
        Args:
            instances: Instance self-links (or partial URLs) to add or remove
        """
        super().__init__(*args, **kwargs)
        self.instances = list(instances)

    def process(self, pool_name: str):
        region = self.require_region()
        body = {self.body_key: [{'instance': link} for link in self.instances]}

        self._log_call(f'targetPools.{self.action}', project=self.project,
                       region=region, targetPool=pool_name)
        request = getattr(self.compute.targetPools(), self.action)
        operation = request(
            project=self.project,
            region=region,
            targetPool=pool_name,
            body=body
        ).execute()

        def on_success():
            pool = self.compute.targetPools().get(
                project=self.project,
                region=region,
                targetPool=pool_name
            ).execute()
            self.context.emit(pool)

        self.tracker.add_region_operation(
            self.project, region, operation, on_success,
            description=f"{self.verb} target pool {pool_name}")


class AddTargetPoolInstanceCommand(_TargetPoolMembershipCommand):
    action = 'addInstance'
    body_key = 'instances'
    verb = 'Add instances to'

    @property
    def name(self) -> str:
        return "add-target-pool-instance"


class RemoveTargetPoolInstanceCommand(_TargetPoolMembershipCommand):
    action = 'removeInstance'
    body_key = 'instances'
    verb = 'Remove instances from'

    @property
    def name(self) -> str:
        return "remove-target-pool-instance"
