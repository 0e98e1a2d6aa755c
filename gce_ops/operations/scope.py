"""
GCE Ops - Operation Scopes

Compute Engine reports the status of an operation through a different
endpoint depending on where the mutated resource lives:

    global  -> globalOperations().get(project, operation)
    region  -> regionOperations().get(project, region, operation)
    zone    -> zoneOperations().get(project, zone, operation)

The three scopes below are the complete set.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from gce_ops.utils.logger import log_api_call


class Scope(ABC):
    """Where an operation lives; decides which status endpoint to poll."""

    project: str

    @abstractmethod
    def get_operation(self, compute, operation_name: str, logger=None) -> dict:
        """
        Fetch the current record of an operation.

        Args:
            compute: GCP compute client
            operation_name: Operation id (the record's 'name' field)
            logger: Optional logger for the API call

        Returns:
            The operation record
        """
        pass

    @abstractmethod
    def describe(self) -> str:
        """Short label for logs and error messages."""
        pass

    def __str__(self):
        return self.describe()


@dataclass(frozen=True)
class GlobalScope(Scope):
    project: str

    def get_operation(self, compute, operation_name: str, logger=None) -> dict:
        log_api_call(logger, 'globalOperations.get',
                     project=self.project, operation=operation_name)
        return compute.globalOperations().get(
            project=self.project,
            operation=operation_name
        ).execute()

    def describe(self) -> str:
        return 'global'


@dataclass(frozen=True)
class RegionScope(Scope):
    project: str
    region: str

    def get_operation(self, compute, operation_name: str, logger=None) -> dict:
        log_api_call(logger, 'regionOperations.get', project=self.project,
                     region=self.region, operation=operation_name)
        return compute.regionOperations().get(
            project=self.project,
            region=self.region,
            operation=operation_name
        ).execute()

    def describe(self) -> str:
        return f'region {self.region}'


@dataclass(frozen=True)
class ZoneScope(Scope):
    project: str
    zone: str

    def get_operation(self, compute, operation_name: str, logger=None) -> dict:
        log_api_call(logger, 'zoneOperations.get', project=self.project,
                     zone=self.zone, operation=operation_name)
        return compute.zoneOperations().get(
            project=self.project,
            zone=self.zone,
            operation=operation_name
        ).execute()

    def describe(self) -> str:
        return f'zone {self.zone}'


def name_from_url(url: str) -> str:
    """
    Get the resource name from a Compute self-link.

    Example:
        name_from_url('https://www.googleapis.com/compute/v1/projects/p/zones/us-central1-a')
        # 'us-central1-a'
    """
    if not url:
        return url
    return url.rstrip('/').split('/')[-1]


def scope_from_operation(project: str, operation: dict) -> Scope:
    """
    Work out the scope of an operation from its record.

    Zonal operations carry a 'zone' link, regional ones a 'region' link,
    global operations neither.

    Args:
        project: Project that owns the operation
        operation: Operation record returned by a mutating call

    Returns:
        ZoneScope, RegionScope or GlobalScope
    """
    if operation.get('zone'):
        return ZoneScope(project, name_from_url(operation['zone']))
    if operation.get('region'):
        return RegionScope(project, name_from_url(operation['region']))
    return GlobalScope(project)
