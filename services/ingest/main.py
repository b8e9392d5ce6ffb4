"""
Find New Checks - action entrypoint

Triggered by the runtime: lists the 'incoming' object storage container and
invokes the save-check-images action for every file found. The action is
idempotent; when it fails the runtime can simply run it again.
"""

import asyncio
import logging
from typing import Any, Dict, Mapping

from services.common.core.http_client import HttpClientFactory
from services.common.core.request_context import clear_run, start_run
from services.ingest.config import IngestConfig
from services.ingest.core.exceptions import ConfigurationError
from services.ingest.core.logging_config import setup_logging
from services.ingest.models import PipelineResult, PipelineState
from services.ingest.services.action_invoker import ActionInvoker, parse_action_name
from services.ingest.services.pipeline import DispatchPipeline
from services.ingest.services.storage_client import ObjectStorageClient

logger = logging.getLogger("ingest.main")


async def run(config: IngestConfig) -> PipelineResult:
    """
    Execute one pipeline run with a freshly built HTTP client.
    """
    try:
        credentials = config.credentials()
        container = config.incoming_container()
        parse_action_name(config.SAVE_ACTION_NAME, config.OW_NAMESPACE)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return PipelineResult.failed(str(e), PipelineState.IDLE)

    factory = HttpClientFactory(config)

    async with factory.create_async_client() as client:
        storage = ObjectStorageClient(
            client,
            identity_url=config.OBJECT_STORAGE_IDENTITY_URL,
            auth_timeout=config.AUTH_TIMEOUT,
            list_timeout=config.LIST_TIMEOUT,
        )
        try:
            invoker = ActionInvoker(
                client,
                api_host=config.OW_API_HOST,
                api_key=config.OW_API_KEY,
                namespace=config.OW_NAMESPACE,
                timeout=config.INVOKE_TIMEOUT,
            )
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            return PipelineResult.failed(str(e), PipelineState.IDLE)

        pipeline = DispatchPipeline(
            storage,
            invoker,
            container=container,
            action_name=config.SAVE_ACTION_NAME,
            policy=config.DISPATCH_POLICY,
        )
        return await pipeline.run(credentials)


def main(params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Runtime entrypoint.

    Args:
        params: Action parameters (OBJECT_STORAGE_* and optional overrides)

    Returns:
        ``{"status": "Success"}`` or a dict with an ``error`` key
    """
    try:
        config = IngestConfig.from_params(params)
    except ConfigurationError as e:
        setup_logging()
        logger.error(f"Configuration error: {e}")
        return PipelineResult.failed(str(e), PipelineState.IDLE).to_response()

    setup_logging(config.LOG_CONFIG_PATH, config.LOG_LEVEL)
    run_id = start_run(config.OW_ACTIVATION_ID)
    logger.info("Retrieving file list", extra={"policy": config.DISPATCH_POLICY.value})
    try:
        result = asyncio.run(run(config))
        logger.info(
            f"Run {run_id} finished: {result.status.value}",
            extra={"file_count": result.file_count},
        )
        return result.to_response()
    finally:
        clear_run()
