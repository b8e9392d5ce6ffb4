"""
Custom exception classes.

Represent the failure classes of one ingestion run. Every one of them ends the
run as a failed PipelineResult; none is retried inside the run.
"""


class IngestError(Exception):
    """Base exception class for the ingestion pipeline."""

    pass


class ConfigurationError(IngestError):
    """Raised for invalid or missing run configuration, before any network I/O."""

    pass


class AuthError(IngestError):
    """Raised when the storage authentication call fails."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Object storage authentication failed: {cause}")


class ListError(IngestError):
    """Raised when listing a container fails or returns malformed data."""

    def __init__(self, container: str, cause: Exception):
        self.container = container
        self.cause = cause
        super().__init__(f"Failed to list container '{container}': {cause}")


class InvocationError(IngestError):
    """Raised inside the invoker when one downstream invocation fails."""

    def __init__(self, action_name: str, file_name: str, cause: Exception):
        self.action_name = action_name
        self.file_name = file_name
        self.cause = cause
        super().__init__(f"Invocation of {action_name} for '{file_name}' failed: {cause}")


class StorageProtocolError(IngestError):
    """The storage service answered, but not in the expected shape."""

    pass


class RuntimeResponseError(IngestError):
    """The execution runtime rejected an invocation request."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Runtime error ({status_code}): {detail}")


class ActionNotFoundError(RuntimeResponseError):
    """The downstream action does not exist."""

    def __init__(self, action_name: str):
        self.action_name = action_name
        super().__init__(404, f"Action not found: {action_name}")


class RuntimeTimeoutError(IngestError):
    """The invocation request timed out."""

    def __init__(self, detail: str = "Runtime request timed out"):
        super().__init__(detail)


class RuntimeUnreachableError(IngestError):
    """Failed to connect to the execution runtime."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Runtime unreachable: {cause}")
