import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ResumeStatus = Literal["processing", "completed", "error"]
TERMINAL_STATUSES = ("completed", "error")

NOT_SPECIFIED = "Not specified"


def _as_number(value) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


class _CamelModel(BaseModel):
    # Wire format is camelCase; accept either spelling on input
    model_config = ConfigDict(populate_by_name=True)


class Education(_CamelModel):
    degree: str = NOT_SPECIFIED
    institution: str = NOT_SPECIFIED
    graduation_year: int | None = Field(None, alias="graduationYear")

    @field_validator("degree", "institution", mode="before")
    @classmethod
    def _default_missing_text(cls, value):
        return NOT_SPECIFIED if value is None else value

    @field_validator("graduation_year", mode="before")
    @classmethod
    def _year_or_none(cls, value):
        # non-numeric years such as "Not specified" become None
        number = _as_number(value)
        return int(number) if number is not None else None


class ResumeSummary(_CamelModel):
    id: str
    name: str = NOT_SPECIFIED
    current_role: str = Field(NOT_SPECIFIED, alias="currentRole")
    experience_years: int = Field(0, alias="experienceYears", ge=0)
    skills: list[str] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    summary: str = ""

    @field_validator("name", "current_role", mode="before")
    @classmethod
    def _default_missing_text(cls, value):
        return NOT_SPECIFIED if value is None else value

    @field_validator("summary", mode="before")
    @classmethod
    def _default_missing_summary(cls, value):
        return "" if value is None else value

    @field_validator("skills", "education", mode="before")
    @classmethod
    def _default_missing_list(cls, value):
        return [] if value is None else value

    @field_validator("experience_years", mode="before")
    @classmethod
    def _whole_years(cls, value):
        # estimates like 3.5 are floored; unknown or negative becomes 0
        number = _as_number(value)
        return max(0, math.floor(number)) if number is not None else 0


class Resume(_CamelModel):
    """One uploaded resume and the state of its processing job."""

    id: str
    file_name: str = Field(alias="fileName")
    upload_date: str = Field(alias="uploadDate")
    status: ResumeStatus = "processing"
    text: str | None = None
    summary: ResumeSummary | None = None

    def public(self) -> dict:
        """Metadata returned to the uploader; never includes text or summary."""
        return self.model_dump(by_alias=True, include={"id", "file_name", "upload_date", "status"})
