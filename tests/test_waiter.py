import logging
import threading
import time
import unittest

from fakes import FakeCompute, RecordingSleep, http_error, no_sleep, operation
from googleapiclient.errors import HttpError

from gce_ops.core.config import DEFAULT_WAIT_CONFIG, WaitConfig
from gce_ops.core.exceptions import OperationFailedError
from gce_ops.operations import (
    GlobalScope,
    OperationHandle,
    OperationWaiter,
    RegionScope,
    StopSignal,
    WaitOutcome,
    ZoneScope,
    operation_errors,
)
from gce_ops.operations.waiter import pause


class StopAfterPolls:
    """Sleep function that requests a stop once `polls` polls were made."""

    def __init__(self, compute, stop, polls):
        self.compute = compute
        self.stop = stop
        self.polls = polls

    def __call__(self, seconds):
        if len(self.compute.calls) >= self.polls:
            self.stop.request_stop()


class TestWaitUntilTerminal(unittest.TestCase):
    def setUp(self) -> None:
        self.compute = FakeCompute()
        self.scope = ZoneScope("p", "us-central1-a")
        self.waiter = OperationWaiter(self.compute, WaitConfig(), sleep=no_sleep)

    def _handle(self, name="op-1", status="PENDING"):
        return OperationHandle(self.scope, operation(name, status))

    def test_polls_until_done(self) -> None:
        self.compute.script_operation(
            "op-1",
            operation("op-1", "PENDING"),
            operation("op-1", "RUNNING"),
            operation("op-1", "DONE"),
        )

        result = self.waiter.wait_until_terminal(self.scope, self._handle())

        self.assertIs(result.outcome, WaitOutcome.SUCCEEDED)
        self.assertTrue(result.succeeded)
        self.assertIsNone(result.error)
        self.assertEqual(result.polls, 3)
        self.assertEqual(len(self.compute.polls_of("op-1")), 3)

    def test_done_with_error_returns_failure_without_raising(self) -> None:
        self.compute.script_operation(
            "op-1",
            operation("op-1", "PENDING"),
            operation("op-1", "DONE", errors=[
                {"code": "QUOTA_EXCEEDED", "message": "Quota 'CPUS' exceeded."},
            ]),
        )

        result = self.waiter.wait_until_terminal(self.scope, self._handle())

        self.assertTrue(result.failed)
        self.assertEqual(result.polls, 2)
        self.assertIsInstance(result.error, OperationFailedError)
        self.assertEqual(result.error.codes, ["QUOTA_EXCEEDED"])
        self.assertIn("Quota 'CPUS' exceeded.", str(result.error))
        self.assertIn("zone us-central1-a", str(result.error))

    def test_no_poll_after_terminal_error(self) -> None:
        self.compute.script_operation(
            "op-1",
            operation("op-1", "DONE", errors=[{"code": "ALREADY_EXISTS", "message": "x"}]),
            operation("op-1", "DONE"),
        )

        result = self.waiter.wait_until_terminal(self.scope, self._handle())

        self.assertTrue(result.failed)
        self.assertEqual(len(self.compute.polls_of("op-1")), 1)

    def test_already_done_is_resolved_without_polling(self) -> None:
        result = self.waiter.wait_until_terminal(
            self.scope, self._handle(status="DONE"))

        self.assertTrue(result.succeeded)
        self.assertEqual(result.polls, 0)
        self.assertEqual(self.compute.calls, [])

    def test_empty_error_list_is_success(self) -> None:
        record = operation("op-1", "DONE")
        record["error"] = {"errors": []}
        self.compute.script_operation("op-1", record)

        result = self.waiter.wait_until_terminal(self.scope, self._handle())

        self.assertTrue(result.succeeded)

    def test_bare_error_list_is_accepted(self) -> None:
        record = operation("op-1", "DONE")
        record["error"] = [{"code": "RESOURCE_NOT_FOUND", "message": "gone"}]
        self.compute.script_operation("op-1", record)

        result = self.waiter.wait_until_terminal(self.scope, self._handle())

        self.assertTrue(result.failed)
        self.assertEqual(result.error.codes, ["RESOURCE_NOT_FOUND"])

    def test_stop_before_first_poll_abandons(self) -> None:
        stop = StopSignal()
        stop.request_stop()

        result = self.waiter.wait_until_terminal(self.scope, self._handle(), stop)

        self.assertIs(result.outcome, WaitOutcome.ABANDONED)
        self.assertIsNone(result.error)
        self.assertEqual(self.compute.calls, [])

    def test_stop_while_polling_abandons(self) -> None:
        stop = StopSignal()
        self.compute.script_operation(
            "op-1",
            operation("op-1", "RUNNING"),
            operation("op-1", "RUNNING"),
            operation("op-1", "DONE"),
        )
        waiter = OperationWaiter(
            self.compute, WaitConfig(), sleep=StopAfterPolls(self.compute, stop, 2))

        result = waiter.wait_until_terminal(self.scope, self._handle(), stop)

        self.assertTrue(result.abandoned)
        self.assertEqual(result.polls, 2)
        self.assertEqual(result.operation["status"], "RUNNING")

    def test_transport_error_propagates(self) -> None:
        self.compute.script_operation("op-1", http_error(500, "backend error"))

        with self.assertRaises(HttpError):
            self.waiter.wait_until_terminal(self.scope, self._handle())

    def test_provider_warnings_are_logged(self) -> None:
        self.compute.script_operation(
            "op-1",
            operation("op-1", "DONE", warnings=[
                {"code": "DEPRECATED_RESOURCE_USED", "message": "image is deprecated"},
            ]),
        )
        logger = logging.getLogger("gce_ops.test.waiter")
        waiter = OperationWaiter(self.compute, WaitConfig(), logger=logger, sleep=no_sleep)

        with self.assertLogs(logger, level="WARNING") as logs:
            waiter.wait_until_terminal(self.scope, self._handle())

        self.assertIn("image is deprecated", logs.output[0])


class TestStopDuringInterval(unittest.TestCase):
    """The default wait between polls ends as soon as a stop is requested."""

    def _stop_later(self, stop, delay=0.1):
        timer = threading.Timer(delay, stop.request_stop)
        self.addCleanup(timer.cancel)
        timer.start()

    def test_stop_from_another_thread_ends_long_interval(self) -> None:
        compute = FakeCompute()
        scope = GlobalScope("p")
        stop = StopSignal()
        waiter = OperationWaiter(compute, WaitConfig(poll_interval=3.0))
        self._stop_later(stop)

        started = time.monotonic()
        result = waiter.wait_until_terminal(
            scope, OperationHandle(scope, operation("op-1", "RUNNING")), stop)
        elapsed = time.monotonic() - started

        self.assertTrue(result.abandoned)
        self.assertEqual(compute.calls, [])
        self.assertLess(elapsed, 1.0)

    def test_pause_reports_stop(self) -> None:
        stop = StopSignal()
        self._stop_later(stop, delay=0.05)

        self.assertTrue(pause(3.0, stop))

    def test_pause_without_stop_uses_sleep_function(self) -> None:
        sleep = RecordingSleep()

        self.assertFalse(pause(0.5, None, sleep))
        self.assertEqual(sleep.calls, [0.5])

    def test_default_config_is_shared(self) -> None:
        self.assertIs(OperationWaiter(FakeCompute()).config, DEFAULT_WAIT_CONFIG)


class TestPollInterval(unittest.TestCase):
    def _run(self, config, polls):
        compute = FakeCompute()
        records = [operation("op-1", "RUNNING")] * (polls - 1) + [operation("op-1", "DONE")]
        compute.script_operation("op-1", *records)
        sleep = RecordingSleep()
        scope = GlobalScope("p")
        OperationWaiter(compute, config, sleep=sleep).wait_until_terminal(
            scope, OperationHandle(scope, operation("op-1")))
        return sleep.calls

    def test_constant_interval_by_default(self) -> None:
        self.assertEqual(self._run(WaitConfig(), 3), [0.15, 0.15, 0.15])

    def test_backoff_is_capped(self) -> None:
        config = WaitConfig(poll_interval=1.0, backoff_multiplier=2.0, max_poll_interval=3.0)
        self.assertEqual(self._run(config, 4), [1.0, 2.0, 3.0, 3.0])


class TestScopes(unittest.TestCase):
    def setUp(self) -> None:
        self.compute = FakeCompute()
        self.waiter = OperationWaiter(self.compute, WaitConfig(), sleep=no_sleep)

    def test_global_scope_polls_global_operations(self) -> None:
        scope = GlobalScope("p")
        self.compute.script_operation("op-g", operation("op-g", "DONE"))

        self.waiter.wait_until_terminal(scope, OperationHandle(scope, operation("op-g")))

        self.assertEqual(self.compute.calls_to("globalOperations.get"),
                         [{"project": "p", "operation": "op-g"}])

    def test_region_scope_polls_region_operations(self) -> None:
        scope = RegionScope("p", "us-central1")
        self.compute.script_operation("op-r", operation("op-r", "DONE"))

        self.waiter.wait_until_terminal(scope, OperationHandle(scope, operation("op-r")))

        self.assertEqual(self.compute.calls_to("regionOperations.get"),
                         [{"project": "p", "region": "us-central1", "operation": "op-r"}])

    def test_zone_scope_polls_zone_operations(self) -> None:
        scope = ZoneScope("p", "us-central1-a")
        self.compute.script_operation("op-z", operation("op-z", "DONE"))

        self.waiter.wait_until_terminal(scope, OperationHandle(scope, operation("op-z")))

        self.assertEqual(self.compute.calls_to("zoneOperations.get"),
                         [{"project": "p", "zone": "us-central1-a", "operation": "op-z"}])


class TestOperationErrors(unittest.TestCase):
    def test_no_error(self) -> None:
        self.assertEqual(operation_errors({"status": "DONE"}), [])

    def test_nested_errors(self) -> None:
        errors = [{"code": "A", "message": "a"}, {"code": "B", "message": "b"}]
        self.assertEqual(operation_errors({"error": {"errors": errors}}), errors)


if __name__ == "__main__":
    unittest.main()
