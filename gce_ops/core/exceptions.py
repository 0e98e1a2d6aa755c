"""
GCE Ops - Custom Exception Classes

This module defines all custom exceptions used in GCE Ops.
Each exception builds a readable message from the fields it carries.
"""


class GCEOpsError(Exception):
    """
    Base exception for all GCE Ops errors.

    All custom exceptions inherit from this, making it easy to catch
    any GCE Ops-specific error with a single except clause.
    """
    pass


class AuthenticationError(GCEOpsError):
    """
    Raised when authentication fails.

    Common causes:
    - No credentials configured
    - Credentials expired
    - Invalid credentials
    """

    def __init__(self, message: str, fix: str = None):
        """
        Args:
            message: Error description
            fix: Suggested fix command (e.g., "gcloud auth login")
        """
        self.fix = fix
        full_message = f"{message}"
        if fix:
            full_message += f"\n\nFix: {fix}"
        super().__init__(full_message)


class ConfigurationError(GCEOpsError):
    """
    Raised when a command is missing required settings.

    Examples:
    - No project given and none set in gcloud config
    - Zonal command without a zone
    """

    def __init__(self, message: str, fix: str = None):
        self.fix = fix
        full_message = f"{message}"
        if fix:
            full_message += f"\n\nFix: {fix}"
        super().__init__(full_message)


class ResourceNotFoundError(GCEOpsError):
    """
    Raised when a resource doesn't exist.
    """

    def __init__(self, kind: str, name: str, location: str, project: str):
        """
        Args:
            kind: Resource kind (e.g., 'Instance', 'Disk')
            name: Name of the resource that wasn't found
            location: Where we looked (e.g., 'zone us-central1-a', 'global')
            project: Project where we looked
        """
        self.kind = kind
        self.name = name
        self.location = location
        self.project = project

        message = f"{kind} '{name}' not found in {location} (project: {project})"
        super().__init__(message)


class OperationFailedError(GCEOpsError):
    """
    Raised when a GCP operation reaches DONE with an error payload.

    The provider reports one or more errors per operation, each with a
    code (e.g. 'RESOURCE_NOT_FOUND', 'QUOTA_EXCEEDED') and a message.
    """

    def __init__(self, operation_name: str, errors: list = None, scope: str = None):
        """
        Args:
            operation_name: Name or label of the operation
            errors: List of {'code': ..., 'message': ...} dicts from the provider
            scope: Optional scope label (e.g., 'zone us-central1-a')
        """
        self.operation_name = operation_name
        self.errors = list(errors or [])
        self.scope = scope

        message = f"Operation '{operation_name}' failed"
        if scope:
            message += f" ({scope})"

        if not self.errors:
            message += ": unknown error"
        elif len(self.errors) == 1:
            message += f": {_format_error(self.errors[0])}"
        else:
            message += ":"
            for error in self.errors:
                message += f"\n  - {_format_error(error)}"

        super().__init__(message)

    @property
    def codes(self) -> list:
        """Error codes reported by the provider, in order."""
        return [error.get('code') for error in self.errors]


class CallbackFailedError(GCEOpsError):
    """
    Raised in place of an exception thrown by a post-completion callback.

    Only used when callback errors are configured to be distinguished
    from operation failures. The original exception is kept as __cause__.
    """

    def __init__(self, operation_name: str, cause: BaseException):
        """
        Args:
            operation_name: Name or label of the operation that succeeded
            cause: Exception raised by the callback
        """
        self.operation_name = operation_name
        self.cause = cause

        message = (f"Operation '{operation_name}' succeeded but its "
                   f"completion handler failed: {cause}")
        super().__init__(message)
        self.__cause__ = cause


class AggregateOperationError(GCEOpsError):
    """
    Raised when more than one operation in a batch failed.

    Wraps every underlying failure, in submission order.
    """

    def __init__(self, errors: list):
        """
        Args:
            errors: List of exceptions captured while draining operations
        """
        self.errors = list(errors)

        message = f"{len(self.errors)} operations failed:"
        for i, error in enumerate(self.errors, 1):
            lines = str(error).splitlines() or [type(error).__name__]
            message += f"\n  [{i}] {lines[0]}"
            for line in lines[1:]:
                message += f"\n      {line}"

        super().__init__(message)

    def __iter__(self):
        return iter(self.errors)

    def __len__(self):
        return len(self.errors)


def _format_error(error: dict) -> str:
    code = error.get('code')
    message = error.get('message')
    if code and message:
        return f"{code}: {message}"
    return str(code or message or error)
