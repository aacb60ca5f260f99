"""Display models - payloads for the display endpoints"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Resolution(BaseModel):
    """Screen resolution in pixels"""

    width: int = Field(1920, gt=0)
    height: int = Field(1080, gt=0)


class DisplayCreate(BaseModel):
    """Payload for registering a new display.

    Attributes:
        display_id: Unique hardware/display identifier (min 3 characters)
        display_name: Human readable name (min 3 characters)
        location: Physical location (min 3 characters)
        password: Optional display login password (min 4 characters if set)
        resolution: Screen resolution
    """

    display_id: str = Field(..., alias="displayId", min_length=3)
    display_name: str = Field(..., alias="displayName", min_length=3)
    location: str = Field(..., min_length=3)
    password: Optional[str] = Field(None, min_length=4)
    resolution: Resolution = Field(default_factory=Resolution)

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    @field_validator("password", mode="before")
    @classmethod
    def _blank_password_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_payload(self) -> Dict[str, Any]:
        """Serialize using the API's camelCase field names"""
        return self.model_dump(by_alias=True, exclude_none=True)
