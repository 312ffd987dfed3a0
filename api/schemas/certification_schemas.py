from datetime import date
from pydantic import BaseModel, model_validator


class CreateCertificationRequest(BaseModel):
    user_id: int
    certification_name: str
    issue_date: date
    expiration_date: date

    @model_validator(mode="after")
    def _expires_after_issue(self):
        if self.expiration_date < self.issue_date:
            raise ValueError("expiration_date must not be before issue_date")
        return self


class CertificationResponse(BaseModel):
    id: str
    user_id: int
    certification_name: str
    issue_date: str
    expiration_date: str
    days_until_expiration: int
    status: str


class CertificationListResponse(BaseModel):
    certifications: list[CertificationResponse]
