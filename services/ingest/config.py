"""
Ingest job configuration.

Settings come from environment variables (pydantic-settings) and are
overridden by the parameters the runtime passes to the action. Credentials
are only ever held in memory for the duration of one run.
"""

from enum import Enum
from typing import Any, Mapping

from pydantic import AliasChoices, Field, ValidationError

from services.common.core.config import BaseAppConfig
from services.ingest.core.exceptions import ConfigurationError
from services.ingest.models import Credentials


class DispatchPolicy(str, Enum):
    """How per-file invocations are issued within one run."""

    CONCURRENT = "concurrent"  # fan out all, join all
    SEQUENTIAL = "sequential"  # listing order, stop at first failure


class IngestConfig(BaseAppConfig):
    """
    Configuration for one ingestion run.
    """

    # Object storage
    OBJECT_STORAGE_REGION_NAME: str = Field(default="", description="dallas or london")
    OBJECT_STORAGE_PROJECT_ID: str = Field(default="", description="Storage project id")
    OBJECT_STORAGE_USER_ID: str = Field(default="", description="Storage user id")
    OBJECT_STORAGE_PASSWORD: str = Field(default="", repr=False, description="Storage password")
    OBJECT_STORAGE_INCOMING_CONTAINER_NAME: str = Field(
        default="", description="Container holding new check images"
    )
    OBJECT_STORAGE_IDENTITY_URL: str = Field(
        default="https://identity.open.softlayer.com/v3/auth/tokens",
        description="Keystone v3 token endpoint",
    )

    # Downstream action
    SAVE_ACTION_NAME: str = Field(
        default="/_/openchecks/save-check-images", description="Action invoked per file"
    )
    DISPATCH_POLICY: DispatchPolicy = Field(
        default=DispatchPolicy.CONCURRENT, description="Per-file dispatch policy"
    )

    # Timeouts (seconds)
    AUTH_TIMEOUT: float = Field(default=10.0, gt=0, description="Auth request timeout")
    LIST_TIMEOUT: float = Field(default=10.0, gt=0, description="List request timeout")
    INVOKE_TIMEOUT: float = Field(default=30.0, gt=0, description="Invoke request timeout")

    # Execution runtime, injected into the action environment by the runtime
    OW_API_HOST: str = Field(
        default="",
        validation_alias=AliasChoices("__OW_API_HOST", "OW_API_HOST"),
        description="Runtime API host",
    )
    OW_API_KEY: str = Field(
        default="",
        repr=False,
        validation_alias=AliasChoices("__OW_API_KEY", "OW_API_KEY"),
        description="Runtime API key (uuid:key)",
    )
    OW_NAMESPACE: str = Field(
        default="_",
        validation_alias=AliasChoices("__OW_NAMESPACE", "OW_NAMESPACE"),
        description="Default namespace",
    )
    OW_ACTIVATION_ID: str = Field(
        default="",
        validation_alias=AliasChoices("__OW_ACTIVATION_ID", "OW_ACTIVATION_ID"),
        description="Activation id of this run",
    )

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "IngestConfig":
        """
        Build the config from action parameters, falling back to the environment.

        Raises:
            ConfigurationError: a parameter has an invalid value
        """
        try:
            return cls(**dict(params))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid action parameters: {e}") from e

    def credentials(self) -> Credentials:
        """
        Raises:
            ConfigurationError: a credential is missing
        """
        missing = [
            name
            for name in (
                "OBJECT_STORAGE_REGION_NAME",
                "OBJECT_STORAGE_PROJECT_ID",
                "OBJECT_STORAGE_USER_ID",
                "OBJECT_STORAGE_PASSWORD",
            )
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(f"Missing object storage settings: {', '.join(missing)}")

        return Credentials(
            region=self.OBJECT_STORAGE_REGION_NAME,
            project_id=self.OBJECT_STORAGE_PROJECT_ID,
            user_id=self.OBJECT_STORAGE_USER_ID,
            password=self.OBJECT_STORAGE_PASSWORD,
        )

    def incoming_container(self) -> str:
        if not self.OBJECT_STORAGE_INCOMING_CONTAINER_NAME:
            raise ConfigurationError("Missing OBJECT_STORAGE_INCOMING_CONTAINER_NAME")
        return self.OBJECT_STORAGE_INCOMING_CONTAINER_NAME
