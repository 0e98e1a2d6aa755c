"""
GCE Ops - Base Command

Every command is a verb-noun handler that processes a stream of pipeline
items (usually resource names):

    begin()          once, before the first item
    process(item)    once per item
    end()            once, after the last item

Read commands fail fast: an error on one item propagates immediately.
Mutating commands (ConcurrentCommand) queue the operation of every item
in an OperationTracker and wait on all of them in end().
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable

from googleapiclient.errors import HttpError

from gce_ops.core.config import DEFAULT_COMMAND_CONFIG, CommandConfig
from gce_ops.core.exceptions import (
    AggregateOperationError,
    ConfigurationError,
    ResourceNotFoundError
)
from gce_ops.operations.waiter import OperationWaiter
from gce_ops.orchestration.context import CommandContext
from gce_ops.orchestration.tracker import DrainSummary, OperationTracker
from gce_ops.utils.logger import log_api_call
from gce_ops.utils.progress import create_progress_tracker


class BaseCommand(ABC):
    """
    Base class for all commands.

    Every command must:
    1. Inherit from this class (or ReadCommand / ConcurrentCommand)
    2. Implement process() for a single pipeline item
    3. Implement the name property

    Example:
        command = RemoveInstanceCommand(compute, project, context, zone='us-central1-a')
        command.run(['vm-1', 'vm-2'])
    """

    def __init__(self, compute, project: str, context: CommandContext = None,
                 config: CommandConfig = None, logger=None,
                 zone: str = None, region: str = None):
        """
        Initialize command.

        Args:
            compute: GCP compute client
            project: GCP project ID
            context: Invocation context (stop signal, result sink)
            config: Command configuration
            logger: Optional logger for debug output
            zone: Zone, for zonal commands
            region: Region, for regional commands
        """
        if not project:
            raise ConfigurationError(
                "No project specified",
                fix="pass --project or run: gcloud config set project PROJECT_ID"
            )
        self.compute = compute
        self.project = project
        self.context = context or CommandContext(logger=logger)
        self.config = config or DEFAULT_COMMAND_CONFIG
        self.logger = logger
        self.zone = zone
        self.region = region

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Verb-noun name of this command (e.g., 'remove-instance').

        Used for display and logging.
        """
        pass

    @abstractmethod
    def process(self, item: Any):
        """
        Handle one pipeline item.

        Args:
            item: The pipeline item, usually a resource name
        """
        pass

    def begin(self):
        """Called once before the first item."""
        pass

    def end(self):
        """Called once after the last item."""
        pass

    def abort(self, error: Exception):
        """Called instead of end() when process() raised."""
        raise error

    def run(self, items: Iterable[Any]):
        """
        Process every pipeline item, then finish the invocation.

        Stops taking new items once the invocation is asked to stop.

        Args:
            items: Pipeline items

        Returns:
            Whatever end() returns
        """
        self.begin()
        try:
            for item in items:
                if self.context.stopping:
                    self._log_debug(f"{self.name}: stop requested, skipping remaining items")
                    break
                self.process(item)
        except Exception as e:
            self.abort(e)
            raise
        return self.end()

    def _log_debug(self, message: str):
        """Log debug message if logger available."""
        if self.logger:
            self.logger.debug(message)

    def _log_call(self, method_name: str, **params):
        log_api_call(self.logger, method_name, **params)

    def require_zone(self) -> str:
        if not self.zone:
            raise ConfigurationError(
                f"{self.name} requires a zone",
                fix="pass --zone or run: gcloud config set compute/zone ZONE"
            )
        return self.zone

    def require_region(self) -> str:
        if not self.region:
            raise ConfigurationError(
                f"{self.name} requires a region",
                fix="pass --region or run: gcloud config set compute/region REGION"
            )
        return self.region

    def not_found(self, error: HttpError, kind: str, name: str, location: str):
        """
        Turn a 404 from the API into ResourceNotFoundError.

        Returns the error to raise; other HTTP errors are returned unchanged.
        """
        if error.resp.status == 404:
            return ResourceNotFoundError(kind, name, location, self.project)
        return error


class ReadCommand(BaseCommand):
    """
    A command that does not change anything.

    Errors propagate immediately, per item.
    """
    pass


class ConcurrentCommand(BaseCommand):
    """
    A command that starts long-running operations.

    Operations are queued while items are processed and waited on
    together in end(). A failed operation never stops the others.

    Example:
        class RemoveDiskCommand(ConcurrentCommand):
            def process(self, name):
                operation = self.compute.disks().delete(...).execute()
                self.tracker.add_zone_operation(self.project, self.zone, operation)
    """

    def __init__(self, *args, waiter: OperationWaiter = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.waiter = waiter or OperationWaiter(
            self.compute, self.config.wait, self.logger)
        self.tracker = None

    def begin(self):
        self.tracker = OperationTracker(
            self.waiter,
            stop=self.context.stop,
            logger=self.logger,
            wrap_callback_errors=self.config.wrap_callback_errors
        )

    def end(self) -> DrainSummary:
        """
        Wait on every queued operation.

        Raises:
            Exception: The failure, if exactly one operation failed
            AggregateOperationError: If several failed
        """
        self.tracker.progress = create_progress_tracker(
            len(self.tracker),
            desc=self.name,
            enabled=self.config.show_progress
        )
        return self.tracker.drain_and_report()

    def abort(self, error: Exception):
        """
        Wait on the operations already started, then re-raise.

        If waiting also fails, all failures are reported together,
        the item's error first.
        """
        if len(self.tracker):
            self.context.warn(
                f"{self.name} failed; waiting for {len(self.tracker)} "
                f"operations already started")
        try:
            self.end()
        except AggregateOperationError as drain_error:
            raise AggregateOperationError([error] + drain_error.errors)
        except Exception as drain_error:
            raise AggregateOperationError([error, drain_error])
        raise error
