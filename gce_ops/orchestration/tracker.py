"""
GCE Ops - Operation Tracker

Collects the operations started while a command processes its pipeline
items, then waits on all of them at the end of the invocation.

Waiting happens once, in submission order. A failure never stops the
remaining operations from being waited on. When the batch is done:

    0 failures  -> DrainSummary is returned
    1 failure   -> that failure is raised as-is
    2+ failures -> AggregateOperationError wrapping all of them
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional

from gce_ops.core.exceptions import AggregateOperationError, CallbackFailedError
from gce_ops.operations.handle import OperationHandle
from gce_ops.operations.scope import (
    GlobalScope,
    RegionScope,
    ZoneScope,
    scope_from_operation
)
from gce_ops.operations.waiter import OperationWaiter, StopSignal
from gce_ops.utils.progress import SimpleProgressTracker


@dataclass
class DrainSummary:
    """Counts from one drain of the tracker."""
    succeeded: int = 0
    failed: int = 0
    abandoned: int = 0
    duration: float = 0.0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed + self.abandoned

    def __str__(self):
        summary = f"Operations: {self.succeeded}/{self.total} succeeded"
        if self.failed:
            summary += f", {self.failed} failed"
        if self.abandoned:
            summary += f", {self.abandoned} abandoned"
        summary += f" (took {self.duration:.1f}s)"
        return summary


class OperationTracker:
    """
    Defers waiting on operations until the end of a command invocation.

    One tracker belongs to one command invocation; it is not shared.

    Example:
        tracker = OperationTracker(waiter, stop=context.stop, logger=logger)

        for name in names:
            operation = compute.instances().delete(
                project=project, zone=zone, instance=name).execute()
            tracker.add_zone_operation(project, zone, operation)

        tracker.drain_and_report()  # raises if anything failed
    """

    def __init__(self, waiter: OperationWaiter, stop: StopSignal = None,
                 logger=None, progress=None, wrap_callback_errors: bool = False):
        """
        Initialize tracker.

        Args:
            waiter: Waiter used for every operation
            stop: Cancellation token of the command invocation
            logger: Optional logger
            progress: Optional progress tracker, advanced once per operation
            wrap_callback_errors: Wrap completion handler errors in
                CallbackFailedError instead of reporting them as-is
        """
        self.waiter = waiter
        self.stop = stop
        self.logger = logger
        self.progress = progress
        self.wrap_callback_errors = wrap_callback_errors
        self._pending: List[OperationHandle] = []

    def _log_info(self, message: str):
        if self.logger:
            self.logger.info(message)

    def _log_debug(self, message: str):
        if self.logger:
            self.logger.debug(message)

    def _log_error(self, message: str):
        if self.logger:
            self.logger.error(message)

    @property
    def pending(self) -> tuple:
        """Operations submitted and not yet waited on, in order."""
        return tuple(self._pending)

    def __len__(self):
        return len(self._pending)

    def submit(self, handle: OperationHandle):
        """Queue an operation to be waited on by drain_and_report()."""
        self._log_debug(f"Queued {handle.label} ({handle.scope.describe()})")
        self._pending.append(handle)

    def add_global_operation(self, project: str, operation: dict,
                             on_success: Optional[Callable[[], Any]] = None,
                             description: str = None):
        self.submit(OperationHandle(GlobalScope(project), operation,
                                    on_success, description))

    def add_region_operation(self, project: str, region: str, operation: dict,
                             on_success: Optional[Callable[[], Any]] = None,
                             description: str = None):
        self.submit(OperationHandle(RegionScope(project, region), operation,
                                    on_success, description))

    def add_zone_operation(self, project: str, zone: str, operation: dict,
                           on_success: Optional[Callable[[], Any]] = None,
                           description: str = None):
        self.submit(OperationHandle(ZoneScope(project, zone), operation,
                                    on_success, description))

    def add_operation(self, project: str, operation: dict,
                      on_success: Optional[Callable[[], Any]] = None,
                      description: str = None):
        """Queue an operation, taking its scope from the record itself."""
        self.submit(OperationHandle(scope_from_operation(project, operation),
                                    operation, on_success, description))

    def drain_and_report(self) -> DrainSummary:
        """
        Wait on every queued operation, in submission order.

        Completion handlers run for operations that succeed. Failed
        operations, status calls that raise, and handlers that raise are
        all collected; nothing stops the loop early.

        Returns:
            DrainSummary when nothing failed

        Raises:
            Exception: The single failure, when exactly one occurred
            AggregateOperationError: When two or more occurred
        """
        handles, self._pending = self._pending, []
        summary = DrainSummary()

        if not handles:
            return summary

        start_time = datetime.now()
        progress = self.progress or SimpleProgressTracker(len(handles))
        failures = []

        self._log_debug(f"Waiting for {len(handles)} operations")

        progress.start()
        try:
            for handle in handles:
                progress.update_step(handle.label)
                error = self._wait_one(handle, summary)
                if error is not None:
                    self._log_error(f"{handle.label}: {error}")
                    failures.append(error)
                progress.advance()
        finally:
            progress.finish()

        summary.duration = (datetime.now() - start_time).total_seconds()
        self._log_info(str(summary))

        if len(failures) == 1:
            raise failures[0]
        if failures:
            raise AggregateOperationError(failures)

        return summary

    def _wait_one(self, handle: OperationHandle, summary: DrainSummary):
        """Wait on one operation; return its failure, if any."""
        try:
            result = self.waiter.wait_until_terminal(handle.scope, handle, self.stop)
        except Exception as e:
            summary.failed += 1
            return e

        if result.abandoned:
            summary.abandoned += 1
            return None

        if result.failed:
            summary.failed += 1
            return result.error

        if handle.on_success is not None:
            try:
                handle.on_success()
            except Exception as e:
                summary.failed += 1
                if self.wrap_callback_errors:
                    return CallbackFailedError(handle.label, e)
                return e

        summary.succeeded += 1
        return None
