from .storage import Credentials, Session, FileDescriptor
from .result import (
    Activation,
    InvocationFailure,
    InvocationOutcome,
    PipelineResult,
    PipelineState,
    PipelineStatus,
)

__all__ = [
    "Credentials",
    "Session",
    "FileDescriptor",
    "Activation",
    "InvocationFailure",
    "InvocationOutcome",
    "PipelineResult",
    "PipelineState",
    "PipelineStatus",
]
