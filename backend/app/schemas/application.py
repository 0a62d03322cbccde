"""Application Schemas — fundraiser application submission.

Invariants:
    - Length limits match the ORM column sizes
    - Blank-field and wallet/phone syntax checks happen in core/enforce_application
"""

from pydantic import BaseModel, Field

from app.core.enforce_application import ApplicationFields
from app.schemas.project import MilestonePlanItem


class ApplicationCreate(BaseModel):
    """Fundraiser application form plus the milestone plan chosen for it."""
    full_name: str = Field(max_length=200)
    project_name: str = Field(max_length=200)
    wallet_address: str = Field(max_length=66)
    phone_number: str = Field(max_length=32)
    project_description: str = Field(max_length=10_000)
    file_reference: str | None = Field(None, max_length=500)
    milestones: list[MilestonePlanItem] = Field(default_factory=list, max_length=50)

    def to_fields(self) -> ApplicationFields:
        return ApplicationFields(
            full_name=self.full_name,
            project_name=self.project_name,
            wallet_address=self.wallet_address,
            phone_number=self.phone_number,
            project_description=self.project_description,
            file_reference=self.file_reference,
        )
