"""Claim submission form validation."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Annotated, Final, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from venue_claims.domain.claims import ClaimDetails, EvidenceFile
from venue_claims.domain.model import BusinessRole

MAX_FILE_BYTES: Final[int] = 10 * 1024 * 1024
MAX_FILES: Final[int] = 5
ALLOWED_CONTENT_TYPES: Final[frozenset[str]] = frozenset({"application/pdf"})

RequiredText = Annotated[str, Field(min_length=1, max_length=255)]


def _is_allowed_content_type(content_type: str | None) -> bool:
    if content_type is None:
        return False
    return content_type.startswith("image/") or content_type in ALLOWED_CONTENT_TYPES


class EvidenceUpload(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: RequiredText
    content: bytes = Field(repr=False)
    content_type: str | None = None

    @model_validator(mode="after")
    def _check_file(self) -> Self:
        if len(self.content) > MAX_FILE_BYTES:
            raise ValueError(f"{self.name} is larger than 10MB")
        if not _is_allowed_content_type(self.content_type):
            raise ValueError(f"{self.name} must be an image or a PDF")
        return self

    @classmethod
    def from_path(cls, path: Path) -> EvidenceUpload:
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(name=path.name, content=path.read_bytes(), content_type=content_type)

    def to_evidence_file(self) -> EvidenceFile:
        return EvidenceFile(name=self.name, content=self.content, content_type=self.content_type)


class ClaimForm(BaseModel):
    """What a claimant fills in; all checks run before the workflow is called."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    claimant_name: RequiredText
    claimant_email: EmailStr
    business_name: RequiredText
    business_email: EmailStr
    business_phone: Annotated[str, Field(min_length=1, max_length=64)]
    business_role: BusinessRole = BusinessRole.OWNER
    business_address: Annotated[str, Field(max_length=500)] = ""
    claim_reason: Annotated[str, Field(min_length=50, max_length=1000)]
    additional_info: Annotated[str, Field(max_length=500)] = ""
    documents: Annotated[list[EvidenceUpload], Field(min_length=1, max_length=MAX_FILES)]

    @field_validator("business_role", mode="before")
    @classmethod
    def _normalise_role(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower().replace(" ", "_").replace("-", "_")
        return value

    def to_details(self) -> ClaimDetails:
        return ClaimDetails(
            claimant_name=self.claimant_name,
            claimant_email=self.claimant_email,
            business_name=self.business_name,
            business_email=self.business_email,
            business_phone=self.business_phone,
            business_role=self.business_role,
            claim_reason=self.claim_reason,
            additional_info=self.additional_info,
            business_address=self.business_address,
        )

    def to_evidence(self) -> list[EvidenceFile]:
        return [document.to_evidence_file() for document in self.documents]
