"""
Invocation and pipeline result models.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class Activation(BaseModel):
    """A downstream invocation accepted by the runtime."""

    kind: Literal["activation"] = "activation"
    file_name: str
    activation_id: str
    response: Dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return True


class InvocationFailure(BaseModel):
    """A downstream invocation that failed."""

    kind: Literal["failure"] = "failure"
    file_name: str
    reason: str

    @property
    def ok(self) -> bool:
        return False


InvocationOutcome = Annotated[Union[Activation, InvocationFailure], Field(discriminator="kind")]


class PipelineState(str, Enum):
    IDLE = "Idle"
    AUTHENTICATING = "Authenticating"
    LISTING = "Listing"
    DISPATCHING = "Dispatching"
    AGGREGATING = "Aggregating"
    DONE = "Done"


class PipelineStatus(str, Enum):
    SUCCESS = "Success"
    FAILURE = "Failure"


class PipelineResult(BaseModel):
    """
    Single result of one pipeline run.

    ``failed_state`` names the stage whose step produced the failure, not the
    stage the pipeline was in when it noticed: an invocation failure found
    while aggregating is reported as Dispatching. Configuration errors found
    before the run starts are reported as Idle.
    """

    status: PipelineStatus
    error: Optional[str] = None
    failed_state: Optional[PipelineState] = None
    file_count: int = 0
    outcomes: List[InvocationOutcome] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == PipelineStatus.SUCCESS

    @classmethod
    def succeeded(cls, outcomes: List[InvocationOutcome]) -> "PipelineResult":
        return cls(status=PipelineStatus.SUCCESS, file_count=len(outcomes), outcomes=outcomes)

    @classmethod
    def failed(
        cls,
        error: str,
        state: PipelineState,
        file_count: int = 0,
        outcomes: Optional[List[InvocationOutcome]] = None,
    ) -> "PipelineResult":
        return cls(
            status=PipelineStatus.FAILURE,
            error=error,
            failed_state=state,
            file_count=file_count,
            outcomes=outcomes or [],
        )

    def to_response(self) -> Dict[str, Any]:
        """
        Convert to the action response dict. An ``error`` key marks the
        activation as failed in the runtime.
        """
        if self.success:
            return {"status": PipelineStatus.SUCCESS.value}

        failures = [o.model_dump() for o in self.outcomes if not o.ok]
        response: Dict[str, Any] = {
            "status": PipelineStatus.FAILURE.value,
            "error": self.error,
            "stage": self.failed_state.value if self.failed_state else None,
        }
        if failures:
            response["failures"] = failures
        return response
