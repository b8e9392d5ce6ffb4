"""
Action Invoker Service

Submits non-blocking invocations of a downstream action through the
execution runtime's REST API and maps every result to an InvocationOutcome.
"""

import logging
from typing import Dict, Optional, Protocol, Tuple
from urllib.parse import quote

import httpx

from services.ingest.core.exceptions import (
    ActionNotFoundError,
    ConfigurationError,
    IngestError,
    InvocationError,
    RuntimeResponseError,
    RuntimeTimeoutError,
    RuntimeUnreachableError,
)
from services.ingest.models import Activation, InvocationFailure, InvocationOutcome

logger = logging.getLogger("ingest.action_invoker")


def parse_action_name(action_name: str, default_namespace: str = "_") -> Tuple[str, str]:
    """
    Split an action name into (namespace, package/action).

    ``/ns/pkg/action`` and ``/ns/action`` carry their own namespace; names
    without a leading slash use ``default_namespace``.

    Raises:
        ConfigurationError: malformed name
    """
    if action_name.startswith("/"):
        parts = action_name[1:].split("/")
        if len(parts) not in (2, 3):
            raise ConfigurationError(f"Invalid fully qualified action name: {action_name}")
        namespace, name_parts = parts[0], parts[1:]
    else:
        name_parts = action_name.split("/")
        if len(name_parts) not in (1, 2):
            raise ConfigurationError(f"Invalid action name: {action_name}")
        namespace = default_namespace

    if not namespace or not all(name_parts):
        raise ConfigurationError(f"Invalid action name: {action_name}")
    return namespace, "/".join(name_parts)


class ActionInvokerProtocol(Protocol):
    async def invoke(
        self, action_name: str, payload: Dict[str, str], file_name: str
    ) -> InvocationOutcome: ...


class ActionInvoker:
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_host: str,
        api_key: str,
        namespace: str = "_",
        timeout: float = 30.0,
    ):
        """
        Args:
            client: httpx.AsyncClient owned by the current run
            api_host: Runtime API host, with or without scheme
            api_key: Runtime API key in ``uuid:key`` form
            namespace: Namespace for action names without one
            timeout: Timeout for each invocation request

        Raises:
            ConfigurationError: missing host or malformed key
        """
        if not api_host:
            raise ConfigurationError("Missing runtime API host (__OW_API_HOST)")
        user, sep, secret = api_key.partition(":")
        if not sep or not user or not secret:
            raise ConfigurationError("Runtime API key (__OW_API_KEY) must be 'uuid:key'")

        if "://" not in api_host:
            api_host = f"https://{api_host}"
        self.api_base = f"{api_host.rstrip('/')}/api/v1"
        self.auth = httpx.BasicAuth(user, secret)
        self.client = client
        self.namespace = namespace or "_"
        self.timeout = timeout

    def action_url(self, action_name: str) -> str:
        namespace, name = parse_action_name(action_name, self.namespace)
        return f"{self.api_base}/namespaces/{quote(namespace)}/actions/{quote(name)}"

    async def invoke(
        self, action_name: str, payload: Dict[str, str], file_name: str
    ) -> InvocationOutcome:
        """
        Invoke an action without waiting for it to finish.

        Args:
            action_name: Downstream action name
            payload: Action parameters
            file_name: Correlation id of the outcome

        Returns:
            Activation when the runtime accepted the call, InvocationFailure otherwise
        """
        logger.info(f"Calling {action_name} for {file_name}")

        try:
            activation_id, body = await self._post(action_name, payload)
        except IngestError as e:
            error = InvocationError(action_name, file_name, e)
            logger.error(
                f"Invocation of {action_name} failed for '{file_name}'",
                extra={
                    "action_name": action_name,
                    "file_name": file_name,
                    "error_type": type(e).__name__,
                    "error_detail": str(e),
                },
            )
            return InvocationFailure(file_name=file_name, reason=str(error))

        logger.info(
            f"{action_name} activation {activation_id} accepted for {file_name}",
            extra={"action_name": action_name, "file_name": file_name},
        )
        return Activation(file_name=file_name, activation_id=activation_id, response=body)

    async def _post(self, action_name: str, payload: Dict[str, str]) -> Tuple[str, dict]:
        url = self.action_url(action_name)
        try:
            response = await self.client.post(
                url,
                params={"blocking": "false"},
                json=payload,
                auth=self.auth,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise RuntimeTimeoutError(str(exc) or "Runtime request timed out") from exc
        except httpx.RequestError as exc:
            raise RuntimeUnreachableError(exc) from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code == 404:
                raise ActionNotFoundError(action_name) from exc
            raise RuntimeResponseError(status_code, _error_detail(exc.response)) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise RuntimeResponseError(response.status_code, "Invalid JSON body") from exc

        activation_id: Optional[str] = body.get("activationId") if isinstance(body, dict) else None
        if not activation_id:
            raise RuntimeResponseError(response.status_code, "Missing activationId in response")
        return activation_id, body


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text
