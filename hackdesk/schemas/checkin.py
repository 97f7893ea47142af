"""Check-in schemas."""
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from hackdesk.core import config
from hackdesk.core.sanitization import (
    MAX_QR_PAYLOAD_LENGTH,
    MAX_TOKEN_LENGTH,
    validate_meal_tag,
    validate_token_format,
)


class MealTagMixin(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meal_tag: Optional[str] = Field(None, alias="mealTag")

    @field_validator('meal_tag')
    @classmethod
    def validate_meal_tag_field(cls, v: Optional[str]) -> Optional[str]:
        """Restrict meal tags to the configured meal set."""
        if v is not None:
            return validate_meal_tag(v, config.settings.MEAL_TAGS)
        return v


class CheckInRequest(MealTagMixin):
    token: str = Field(..., min_length=1, max_length=MAX_TOKEN_LENGTH)

    @field_validator('token')
    @classmethod
    def validate_token_field(cls, v: str) -> str:
        """Validate token format."""
        return validate_token_format(v)


class ScanRequest(MealTagMixin):
    payload: str = Field(..., min_length=1, max_length=MAX_QR_PAYLOAD_LENGTH)  # Raw QR text


class DisplayFields(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    university: Optional[str] = None
    shirt_size: Optional[str] = None


class CheckInSuccessResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    record_id: int = Field(..., alias="recordId")
    meal_tag: Optional[str] = Field(None, alias="mealTag")
    display_fields: DisplayFields = Field(..., alias="displayFields")


class CheckInFailureResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = False
    reason: str
    display_fields: Optional[DisplayFields] = Field(None, alias="displayFields")


def to_wire(model: BaseModel) -> Dict[str, Any]:
    """Dump with camelCase aliases, dropping absent top-level fields."""
    data = model.model_dump(by_alias=True)
    return {key: value for key, value in data.items() if value is not None}
