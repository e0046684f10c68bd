"""
Identity data models.

IdentityRecord is the single canonical shape of a signed-in user, whatever
field names the backend happened to send.
"""

from typing import Any

from pydantic import BaseModel, Field


class IdentityRecord(BaseModel):
    """
    Canonical identity record, held in memory and persisted under ``user``.

    Fields the backend sends beyond the ones below are kept as extras and
    serialized back untouched.
    """

    id: Any = Field(None, description="Opaque stable user identifier")
    username: str = Field(..., min_length=1, description="Display name")
    email: Any = Field(None, description="Email address, if the backend sent one")
    profile_picture: str = Field(
        "",
        alias="profilePicture",
        description="Absolute picture URL, or empty string",
    )

    model_config = {
        "frozen": True,
        "extra": "allow",
    }

    def to_storage(self) -> dict[str, Any]:
        """Dump with backend field names, including passthrough fields."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
