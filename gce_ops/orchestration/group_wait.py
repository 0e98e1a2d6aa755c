"""
GCE Ops - Managed Instance Group Stabilization

Waits until no instance of a managed instance group has a pending action.
Unlike the operation waiter, expiry of the caller's timeout is a warning,
not a failure.
"""

import time

from gce_ops.core.config import DEFAULT_WAIT_CONFIG, WaitConfig
from gce_ops.operations.waiter import StopSignal, pause
from gce_ops.utils.logger import log_api_call


def group_is_stable(managed_instances: list) -> bool:
    """True when no managed instance has a current action other than NONE."""
    return all(i.get('currentAction', 'NONE') == 'NONE' for i in managed_instances)


def wait_for_group_stable(compute, project: str, zone: str, name: str,
                          stop: StopSignal = None, timeout: float = None,
                          config: WaitConfig = None, logger=None,
                          sleep=None, clock=time.monotonic) -> bool:
    """
    Poll a managed instance group until it is stable.

    Args:
        compute: GCP compute client
        project: GCP project ID
        zone: Zone of the group
        name: Name of the managed instance group
        stop: Optional cancellation token
        timeout: Maximum seconds to wait (None = no limit)
        config: Poll interval settings
        logger: Optional logger
        sleep: Function used to sleep between polls (default: wait on the
            stop signal)
        clock: Monotonic clock used for the timeout

    Returns:
        True if the group became stable, False on timeout or stop
    """
    config = config or DEFAULT_WAIT_CONFIG
    start_time = clock()

    while True:
        if pause(config.group_poll_interval, stop, sleep):
            if logger:
                logger.debug(f"Stopped waiting for instance group {name}")
            return False

        log_api_call(logger, 'instanceGroupManagers.listManagedInstances',
                     project=project, zone=zone, instanceGroupManager=name)
        response = compute.instanceGroupManagers().listManagedInstances(
            project=project,
            zone=zone,
            instanceGroupManager=name
        ).execute()

        instances = response.get('managedInstances') or []
        if group_is_stable(instances):
            if logger:
                logger.debug(f"Instance group {name} is stable ({len(instances)} instances)")
            return True

        if timeout is not None and clock() - start_time > timeout:
            if logger:
                busy = sum(1 for i in instances if i.get('currentAction', 'NONE') != 'NONE')
                logger.warning(
                    f"Timed out after {timeout}s waiting for instance group {name}: "
                    f"{busy} instances still busy")
            return False
