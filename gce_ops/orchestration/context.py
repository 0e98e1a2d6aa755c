"""
GCE Ops - Command Context

What a command invocation provides to the code it runs: the stop signal
and the sinks for result objects and warnings.
"""

from typing import Any, Callable, List, Optional

from gce_ops.operations.waiter import StopSignal
from gce_ops.utils.logger import get_logger


class CommandContext:
    """
    Invocation-scoped context.

    When no emit function is given, emitted objects are collected in
    `emitted` (handy for tests and programmatic use).

    Example:
        context = CommandContext(emit=print)
        context.emit({'name': 'my-vm', 'status': 'DELETED'})
    """

    def __init__(self, emit: Optional[Callable[[Any], None]] = None,
                 stop: StopSignal = None, logger=None):
        self.stop = stop or StopSignal()
        self.logger = logger
        self.emitted: List[Any] = []
        self._emit = emit

    def emit(self, obj: Any):
        """Send a result object back to the caller."""
        if self._emit is None:
            self.emitted.append(obj)
        else:
            self._emit(obj)

    def warn(self, message: str):
        (self.logger or get_logger()).warning(message)

    @property
    def stopping(self) -> bool:
        return self.stop.stop_requested
