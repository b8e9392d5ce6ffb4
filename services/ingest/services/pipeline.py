"""
Dispatch Pipeline - Service Layer

Idle -> Authenticating -> Listing -> Dispatching -> Aggregating -> Done.

A run never revisits a state and never retries a step; the runtime re-runs
the whole pipeline on failure, so the same listing must always produce the
same set of invocations.
"""

import asyncio
import logging
from typing import List, Sequence

from services.ingest.config import DispatchPolicy
from services.ingest.core.exceptions import IngestError
from services.ingest.models import (
    Credentials,
    FileDescriptor,
    InvocationOutcome,
    PipelineResult,
    PipelineState,
)
from services.ingest.services.action_invoker import ActionInvokerProtocol
from services.ingest.services.storage_client import StorageClientProtocol

logger = logging.getLogger("ingest.pipeline")


class DispatchPipeline:
    """
    Lists the incoming container and invokes the save action once per file.
    """

    def __init__(
        self,
        storage: StorageClientProtocol,
        invoker: ActionInvokerProtocol,
        container: str,
        action_name: str,
        policy: DispatchPolicy = DispatchPolicy.CONCURRENT,
    ):
        self.storage = storage
        self.invoker = invoker
        self.container = container
        self.action_name = action_name
        self.policy = policy
        self.state = PipelineState.IDLE

    def _transition(self, state: PipelineState) -> None:
        logger.debug(f"Pipeline state {self.state.value} -> {state.value}")
        self.state = state

    async def run(self, credentials: Credentials) -> PipelineResult:
        if self.state != PipelineState.IDLE:
            raise RuntimeError("DispatchPipeline instances run once; build a new one per run")

        self._transition(PipelineState.AUTHENTICATING)
        try:
            session = await self.storage.authenticate(credentials)
        except IngestError as e:
            return self._fail(str(e), PipelineState.AUTHENTICATING)

        self._transition(PipelineState.LISTING)
        logger.info(f"Retrieving file list from '{self.container}'")
        try:
            files = await self.storage.list_files(session, self.container)
        except IngestError as e:
            return self._fail(str(e), PipelineState.LISTING)
        logger.info(
            f"Found {len(files)} files",
            extra={"container": self.container, "file_count": len(files)},
        )

        self._transition(PipelineState.DISPATCHING)
        if self.policy == DispatchPolicy.SEQUENTIAL:
            outcomes = await self._dispatch_sequential(files)
        else:
            outcomes = await self._dispatch_concurrent(files)

        self._transition(PipelineState.AGGREGATING)
        return self._aggregate(files, outcomes)

    async def _invoke(self, descriptor: FileDescriptor) -> InvocationOutcome:
        return await self.invoker.invoke(
            self.action_name, descriptor.to_payload(), file_name=descriptor.name
        )

    async def _dispatch_concurrent(
        self, files: Sequence[FileDescriptor]
    ) -> List[InvocationOutcome]:
        # Every file is invoked even when another invocation fails.
        results = await asyncio.gather(*(self._invoke(f) for f in files))
        by_name = {outcome.file_name: outcome for outcome in results}
        return [by_name[f.name] for f in files if f.name in by_name]

    async def _dispatch_sequential(
        self, files: Sequence[FileDescriptor]
    ) -> List[InvocationOutcome]:
        outcomes: List[InvocationOutcome] = []
        for descriptor in files:
            outcome = await self._invoke(descriptor)
            outcomes.append(outcome)
            if not outcome.ok:
                skipped = len(files) - len(outcomes)
                if skipped:
                    logger.warning(
                        f"Stopping dispatch after failure, {skipped} files not dispatched",
                        extra={"file_name": descriptor.name},
                    )
                break
        return outcomes

    def _aggregate(
        self, files: Sequence[FileDescriptor], outcomes: List[InvocationOutcome]
    ) -> PipelineResult:
        missing = {f.name for f in files} - {o.file_name for o in outcomes}
        first_failure = next((o for o in outcomes if not o.ok), None)

        if first_failure is not None:
            return self._fail(
                first_failure.reason,
                PipelineState.DISPATCHING,
                file_count=len(files),
                outcomes=outcomes,
            )
        if missing:
            # Every dispatched file must yield exactly one outcome.
            return self._fail(
                f"No invocation outcome for: {', '.join(sorted(missing))}",
                PipelineState.AGGREGATING,
                file_count=len(files),
                outcomes=outcomes,
            )

        self._transition(PipelineState.DONE)
        logger.info(
            f"Dispatched {len(outcomes)} files to {self.action_name}",
            extra={"file_count": len(outcomes), "action_name": self.action_name},
        )
        return PipelineResult.succeeded(outcomes)

    def _fail(self, error: str, state: PipelineState, **kwargs) -> PipelineResult:
        self._transition(PipelineState.DONE)
        logger.error(f"Pipeline failed while {state.value}: {error}", extra={"stage": state.value})
        return PipelineResult.failed(error, state, **kwargs)
