"""
GCE Ops - Operation Waiter

Polls one operation until it is DONE, or until the command is asked to stop.

The waiter never raises for a failed operation. It returns a WaitResult
tagged SUCCEEDED, FAILED or ABANDONED and leaves the decision to raise to
the caller (see orchestration.tracker).

    SUBMITTED -> POLLING -> SUCCEEDED
                         -> FAILED      (DONE with an error payload)
                         -> ABANDONED   (stop requested)
"""

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from gce_ops.core.config import DEFAULT_WAIT_CONFIG, WaitConfig
from gce_ops.core.exceptions import OperationFailedError
from gce_ops.operations.handle import OperationHandle
from gce_ops.operations.scope import Scope
from gce_ops.utils.logger import (
    log_api_response,
    log_operation_end,
    log_operation_start
)

DONE = 'DONE'


class WaitOutcome(Enum):
    SUCCEEDED = 'SUCCEEDED'
    FAILED = 'FAILED'
    ABANDONED = 'ABANDONED'


@dataclass
class WaitResult:
    """
    Result of waiting on one operation.

    Attributes:
        outcome: SUCCEEDED, FAILED or ABANDONED
        operation: Last operation record observed
        error: The failure, only set when outcome is FAILED
        polls: Number of status calls made
    """
    outcome: WaitOutcome
    operation: Dict[str, Any]
    error: Optional[OperationFailedError] = None
    polls: int = 0

    @property
    def succeeded(self) -> bool:
        return self.outcome is WaitOutcome.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.outcome is WaitOutcome.FAILED

    @property
    def abandoned(self) -> bool:
        return self.outcome is WaitOutcome.ABANDONED


class StopSignal:
    """
    Cooperative cancellation token for one command invocation.

    Set from a signal handler (Ctrl-C) or another thread; checked by the
    waiter at every poll.
    """

    def __init__(self):
        self._event = threading.Event()

    def request_stop(self):
        self._event.set()

    @property
    def stop_requested(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Block up to timeout seconds; True if stop was requested."""
        return self._event.wait(timeout)


def pause(interval: float, stop: StopSignal = None, sleep=None) -> bool:
    """
    Wait interval seconds between polls.

    Without an explicit sleep function the wait ends as soon as stop is
    requested.

    Returns:
        True if stop was requested
    """
    if sleep is None:
        if stop is not None:
            return stop.wait(interval)
        time.sleep(interval)
        return False

    sleep(interval)
    return stop is not None and stop.stop_requested


def operation_errors(operation: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Get the error entries of an operation record.

    Compute returns {'error': {'errors': [{'code', 'message'}, ...]}};
    a bare list under 'error' is accepted too.
    """
    error = operation.get('error')
    if not error:
        return []
    if isinstance(error, dict):
        return list(error.get('errors') or [])
    return list(error)


class OperationWaiter:
    """
    Waits for operations to reach a terminal state.

    Example:
        waiter = OperationWaiter(compute, WaitConfig(), logger)
        result = waiter.wait_until_terminal(handle.scope, handle, stop)

        if result.failed:
            print(result.error.codes)
    """

    def __init__(self, compute, config: WaitConfig = None, logger=None,
                 sleep=None):
        """
        Initialize waiter.

        Args:
            compute: GCP compute client
            config: Poll interval and backoff settings
            logger: Optional logger for debug output
            sleep: Function used to sleep between polls (default: wait on
                the stop signal, or time.sleep without one)
        """
        self.compute = compute
        self.config = config or DEFAULT_WAIT_CONFIG
        self.logger = logger
        self._sleep = sleep

    def _log_debug(self, message: str):
        if self.logger:
            self.logger.debug(message)

    def _log_warning(self, message: str):
        if self.logger:
            self.logger.warning(message)

    def wait_until_terminal(self, scope: Scope, handle: OperationHandle,
                            stop: StopSignal = None) -> WaitResult:
        """
        Poll the operation until it is DONE or stop is requested.

        A record that is already DONE when handed over is resolved without
        polling. A terminal error is reported, never retried.

        Args:
            scope: Scope whose status endpoint to poll
            handle: Operation to wait on
            stop: Optional cancellation token

        Returns:
            WaitResult (never raises for a failed operation)

        Raises:
            googleapiclient.errors.HttpError: If a status call itself fails
        """
        start_time = log_operation_start(self.logger, handle.label)

        operation = handle.operation
        self._report_warnings(handle, operation)

        polls = 0
        interval = self.config.poll_interval

        while operation.get('status') != DONE:
            if stop is not None and stop.stop_requested:
                break

            if pause(interval, stop, self._sleep):
                break

            operation = scope.get_operation(
                self.compute, handle.operation_name, self.logger)
            polls += 1
            log_api_response(self.logger, operation)
            self._log_debug(f"Poll {polls} of {handle.label}: {operation.get('status')}")
            self._report_warnings(handle, operation)

            interval = self.config.next_interval(interval)

        result = self._resolve(scope, handle, operation, polls)
        log_operation_end(self.logger, handle.label, result.outcome.value, start_time)
        return result

    def _resolve(self, scope: Scope, handle: OperationHandle,
                 operation: Dict[str, Any], polls: int) -> WaitResult:
        if operation.get('status') != DONE:
            self._log_debug(f"Stopped waiting for {handle.label}")
            return WaitResult(WaitOutcome.ABANDONED, operation, polls=polls)

        errors = operation_errors(operation)
        if errors:
            error = OperationFailedError(handle.label, errors, scope.describe())
            return WaitResult(WaitOutcome.FAILED, operation, error=error, polls=polls)

        return WaitResult(WaitOutcome.SUCCEEDED, operation, polls=polls)

    def _report_warnings(self, handle: OperationHandle, operation: Dict[str, Any]):
        for warning in operation.get('warnings') or []:
            self._log_warning(f"{handle.label}: {warning.get('message', warning)}")
