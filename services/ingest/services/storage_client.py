"""
Object Storage Client

Authenticates against the Keystone v3 identity endpoint and lists objects in
a Swift container. One client instance serves one run.
"""

import logging
from typing import Dict, List, Protocol

import httpx
from pydantic import ValidationError

from services.ingest.core.exceptions import (
    AuthError,
    ConfigurationError,
    ListError,
    StorageProtocolError,
)
from services.ingest.models import Credentials, FileDescriptor, Session

logger = logging.getLogger("ingest.storage_client")

DEFAULT_IDENTITY_URL = "https://identity.open.softlayer.com/v3/auth/tokens"

REGION_HOSTS: Dict[str, str] = {
    "dallas": "https://dal.objectstorage.open.softlayer.com",
    "london": "https://lon.objectstorage.open.softlayer.com",
}


def resolve_base_url(region: str, project_id: str) -> str:
    """
    Map a region name to the account URL of the project.

    Raises:
        ConfigurationError: unknown region or empty project id
    """
    host = REGION_HOSTS.get(region)
    if host is None:
        raise ConfigurationError(
            f"Invalid region '{region}', expected one of: {', '.join(sorted(REGION_HOSTS))}"
        )
    if not project_id:
        raise ConfigurationError("Missing storage project id")
    return f"{host}/v1/AUTH_{project_id}/"


def build_auth_body(credentials: Credentials) -> dict:
    """Keystone v3 password auth scoped to the credentials' project."""
    return {
        "auth": {
            "identity": {
                "methods": ["password"],
                "password": {
                    "user": {
                        "id": credentials.user_id,
                        "password": credentials.password.get_secret_value(),
                    }
                },
            },
            "scope": {"project": {"id": credentials.project_id}},
        }
    }


class StorageClientProtocol(Protocol):
    async def authenticate(self, credentials: Credentials) -> Session: ...

    async def list_files(self, session: Session, container: str) -> List[FileDescriptor]: ...


class ObjectStorageClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        identity_url: str = DEFAULT_IDENTITY_URL,
        auth_timeout: float = 10.0,
        list_timeout: float = 10.0,
    ):
        """
        Args:
            client: httpx.AsyncClient owned by the current run
            identity_url: Keystone v3 token endpoint
            auth_timeout: Timeout for the token request
            list_timeout: Timeout for the listing request
        """
        self.client = client
        self.identity_url = identity_url
        self.auth_timeout = auth_timeout
        self.list_timeout = list_timeout

    async def authenticate(self, credentials: Credentials) -> Session:
        """
        Exchange credentials for a token.

        Raises:
            ConfigurationError: invalid region (raised before any request)
            AuthError: transport failure, rejected credentials or missing token
        """
        base_url = resolve_base_url(credentials.region, credentials.project_id)

        logger.info(
            f"Authenticating against {self.identity_url}",
            extra={"region": credentials.region, "project_id": credentials.project_id},
        )
        try:
            response = await self.client.post(
                self.identity_url,
                json=build_auth_body(credentials),
                timeout=self.auth_timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(
                "Object storage authentication failed",
                extra={"error_type": type(e).__name__, "error_detail": str(e)},
            )
            raise AuthError(e) from e

        token = response.headers.get("X-Subject-Token")
        if not token:
            raise AuthError(StorageProtocolError("Missing X-Subject-Token header"))

        return Session(base_url=base_url, auth_token=token)

    async def list_files(self, session: Session, container: str) -> List[FileDescriptor]:
        """
        List the objects of a container.

        Raises:
            ListError: transport failure, non-2xx status or malformed listing
        """
        if not session.is_authenticated:
            raise ListError(container, StorageProtocolError("Session is not authenticated"))

        url = f"{session.base_url}{container}"
        try:
            response = await self.client.get(
                url,
                headers={"X-Auth-Token": session.auth_token, "Accept": "application/json"},
                timeout=self.list_timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(
                f"Listing container '{container}' failed",
                extra={
                    "container": container,
                    "error_type": type(e).__name__,
                    "error_detail": str(e),
                },
            )
            raise ListError(container, e) from e

        # Swift answers 204 with no body for an empty container.
        if response.status_code == 204 or not response.content.strip():
            return []

        try:
            entries = response.json()
        except ValueError as e:
            raise ListError(container, StorageProtocolError(f"Invalid JSON body: {e}")) from e

        if not isinstance(entries, list):
            raise ListError(
                container,
                StorageProtocolError(f"Expected a JSON array, got {type(entries).__name__}"),
            )

        try:
            return [FileDescriptor.model_validate(entry) for entry in entries]
        except ValidationError as e:
            raise ListError(container, StorageProtocolError(f"Malformed entry: {e}")) from e
