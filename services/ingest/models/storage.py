"""
Object storage models.

Credentials and Session are per-run values; FileDescriptor is one entry of
a container listing.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class Credentials(BaseModel):
    """Password credentials scoped to one storage project."""

    model_config = ConfigDict(frozen=True)

    region: str = Field(..., description="Storage region name (dallas, london)")
    project_id: str = Field(..., min_length=1, description="Storage project id")
    user_id: str = Field(..., min_length=1, description="Storage user id")
    password: SecretStr = Field(..., description="Storage password")


class Session(BaseModel):
    """
    Authenticated storage session.

    Lives for a single run; the token expiry is owned by the storage service.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., description="Account URL, ends with '/'")
    auth_token: str = Field(default="", repr=False, description="X-Auth-Token value")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.auth_token)


class FileDescriptor(BaseModel):
    """Listing-time snapshot of one object in a container."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., min_length=1)
    content_type: str
    last_modified: str

    def to_payload(self) -> Dict[str, str]:
        """Parameters passed to the downstream action."""
        return {
            "fileName": self.name,
            "contentType": self.content_type,
            "lastModified": self.last_modified,
        }
