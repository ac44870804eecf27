# discovery_intake/schemas/discovery_call.py
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator


class DiscoveryCallSubmission(BaseModel):
    """Discovery call formulier zoals de website het post (JSON of form)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    contact_name: str = Field(..., alias="contactName")
    email: EmailStr
    phone: str = ""
    service_name: str = Field("", alias="serviceName")
    position: str = ""
    service_type: str = Field("", alias="serviceType")
    student_count: str = Field("", alias="studentCount")
    indicative_budget: str = Field("", alias="indicativeBudget")
    age_group: str = Field("", alias="ageGroup")
    phase: Union[List[str], str, None] = Field(
        None, validation_alias=AliasChoices("phase[]", "phase")
    )
    additional_info: str = Field("", alias="additional-info")

    # base64 data URLs ("data:image/jpeg;base64,....")
    photos: List[str] = Field(
        default_factory=list, validation_alias=AliasChoices("photos", "photos[]")
    )

    @field_validator(
        "phone",
        "service_name",
        "position",
        "service_type",
        "student_count",
        "indicative_budget",
        "age_group",
        "additional_info",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, v):
        if v is None:
            return ""
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("contact_name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("contactName is required")
        return v

    @field_validator("photos", mode="before")
    @classmethod
    def _photos_as_list(cls, v):
        if v is None or v == "":
            return []
        if isinstance(v, str):
            return [v]
        return v


class DiscoveryCallResponse(BaseModel):
    success: bool
    contactId: Optional[str] = None
    message: str
