"""
GCE Ops - Operation Handle

One in-flight server-side mutation: the operation record returned by the
mutating call, the scope to poll it in, and what to do once it succeeds.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from gce_ops.operations.scope import Scope, name_from_url


@dataclass
class OperationHandle:
    """
    Attributes:
        scope: Scope whose status endpoint reports on this operation
        operation: Record returned by the mutating call (must have 'name')
        on_success: Optional zero-argument callback, run once on success
        description: Optional label for logs and errors
    """
    scope: Scope
    operation: Dict[str, Any]
    on_success: Optional[Callable[[], Any]] = None
    description: Optional[str] = None

    @property
    def operation_name(self) -> str:
        return self.operation.get('name', '')

    @property
    def label(self) -> str:
        """Human-readable name, e.g. 'delete my-vm'."""
        if self.description:
            return self.description
        op_type = self.operation.get('operationType')
        target = name_from_url(self.operation.get('targetLink', ''))
        if op_type and target:
            return f"{op_type} {target}"
        return self.operation_name or 'operation'
