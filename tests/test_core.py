import logging
import unittest

from gce_ops.core.config import (
    CommandConfig,
    WaitConfig,
    create_command_config,
    create_wait_config,
)
from gce_ops.core.exceptions import (
    AggregateOperationError,
    CallbackFailedError,
    GCEOpsError,
    OperationFailedError,
    ResourceNotFoundError,
)
from gce_ops.operations import (
    GlobalScope,
    OperationHandle,
    RegionScope,
    ZoneScope,
    name_from_url,
    scope_from_operation,
)
from gce_ops.utils.logger import (
    CleanFormatter,
    log_api_call,
    log_operation_end,
    log_operation_start,
)


class TestExceptions(unittest.TestCase):
    def test_operation_failed_single_error(self) -> None:
        error = OperationFailedError(
            "Delete instance b",
            [{"code": "RESOURCE_NOT_FOUND", "message": "The resource was not found"}],
            scope="zone us-central1-a",
        )

        self.assertIsInstance(error, GCEOpsError)
        self.assertEqual(error.codes, ["RESOURCE_NOT_FOUND"])
        self.assertEqual(
            str(error),
            "Operation 'Delete instance b' failed (zone us-central1-a): "
            "RESOURCE_NOT_FOUND: The resource was not found",
        )

    def test_operation_failed_several_errors(self) -> None:
        error = OperationFailedError("op", [
            {"code": "A", "message": "first"},
            {"code": "B", "message": "second"},
        ])

        self.assertEqual(error.codes, ["A", "B"])
        self.assertIn("\n  - A: first", str(error))
        self.assertIn("\n  - B: second", str(error))

    def test_aggregate_enumerates_errors(self) -> None:
        errors = [
            OperationFailedError("op-1", [{"code": "A", "message": "a"}]),
            ValueError("bad\nsecond line"),
        ]

        aggregate = AggregateOperationError(errors)

        self.assertEqual(aggregate.errors, errors)
        self.assertEqual(len(aggregate), 2)
        self.assertEqual(list(aggregate), errors)
        message = str(aggregate)
        self.assertTrue(message.startswith("2 operations failed:"))
        self.assertIn("[1] Operation 'op-1' failed: A: a", message)
        self.assertIn("[2] bad\n      second line", message)

    def test_callback_failed_keeps_cause(self) -> None:
        cause = KeyError("name")
        error = CallbackFailedError("Resize disk d", cause)

        self.assertIs(error.__cause__, cause)
        self.assertIn("succeeded but its completion handler failed", str(error))

    def test_resource_not_found(self) -> None:
        error = ResourceNotFoundError("Instance", "vm", "zone z", "p")

        self.assertEqual(str(error), "Instance 'vm' not found in zone z (project: p)")


class TestConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        config = CommandConfig()

        self.assertEqual(config.wait.poll_interval, 0.15)
        self.assertEqual(config.wait.backoff_multiplier, 1.0)
        self.assertFalse(config.wrap_callback_errors)

    def test_next_interval(self) -> None:
        config = WaitConfig(poll_interval=1.0, backoff_multiplier=1.5, max_poll_interval=2.0)

        self.assertEqual(config.next_interval(1.0), 1.5)
        self.assertEqual(config.next_interval(1.5), 2.0)

    def test_create_wait_config_validates(self) -> None:
        with self.assertRaises(ValueError):
            create_wait_config(poll_interval=0)
        with self.assertRaises(ValueError):
            create_wait_config(backoff_multiplier=0.5)

    def test_create_wait_config_raises_cap_to_interval(self) -> None:
        config = create_wait_config(poll_interval=10.0, max_poll_interval=1.0)

        self.assertEqual(config.max_poll_interval, 10.0)

    def test_create_command_config(self) -> None:
        config = create_command_config(output_format="json", show_progress=False)

        self.assertEqual(config.output_format, "json")
        self.assertFalse(config.show_progress)


class TestScopeHelpers(unittest.TestCase):
    def test_name_from_url(self) -> None:
        self.assertEqual(
            name_from_url("https://www.googleapis.com/compute/v1/projects/p/zones/us-east1-b"),
            "us-east1-b",
        )
        self.assertEqual(name_from_url("us-east1-b"), "us-east1-b")

    def test_scope_from_operation(self) -> None:
        self.assertEqual(scope_from_operation("p", {"zone": "projects/p/zones/z1"}),
                         ZoneScope("p", "z1"))
        self.assertEqual(scope_from_operation("p", {"region": "projects/p/regions/r1"}),
                         RegionScope("p", "r1"))
        self.assertEqual(scope_from_operation("p", {}), GlobalScope("p"))

    def test_describe(self) -> None:
        self.assertEqual(GlobalScope("p").describe(), "global")
        self.assertEqual(str(RegionScope("p", "r1")), "region r1")
        self.assertEqual(str(ZoneScope("p", "z1")), "zone z1")

    def test_handle_label(self) -> None:
        record = {
            "name": "operation-123",
            "operationType": "delete",
            "targetLink": "https://www.googleapis.com/compute/v1/projects/p/zones/z/instances/vm",
        }

        self.assertEqual(OperationHandle(GlobalScope("p"), record).label, "delete vm")
        self.assertEqual(
            OperationHandle(GlobalScope("p"), record, description="Delete vm").label,
            "Delete vm",
        )
        self.assertEqual(
            OperationHandle(GlobalScope("p"), {"name": "operation-123"}).label,
            "operation-123",
        )


class TestLogging(unittest.TestCase):
    def _record(self, level):
        return logging.LogRecord("gce_ops", level, __file__, 1, "3 operations pending", None, None)

    def test_clean_formatter(self) -> None:
        formatter = CleanFormatter()

        self.assertEqual(formatter.format(self._record(logging.INFO)), "3 operations pending")
        self.assertEqual(formatter.format(self._record(logging.WARNING)),
                         "[!]  WARNING: 3 operations pending")

    def test_helpers_accept_missing_logger(self) -> None:
        log_api_call(None, "zoneOperations.get", operation="op-1")
        start = log_operation_start(None, "op-1")
        log_operation_end(None, "op-1", "SUCCEEDED", start)


if __name__ == "__main__":
    unittest.main()
