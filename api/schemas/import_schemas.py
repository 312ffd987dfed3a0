from pydantic import BaseModel, ConfigDict
from typing import Optional


class ImportRow(BaseModel):
    """One spreadsheet row. Column names follow the export format."""
    model_config = ConfigDict(extra="ignore")

    FirstName: Optional[str] = None
    LastName: Optional[str] = None
    Email: Optional[str] = None
    Password: Optional[str] = None


class BulkImportRequest(BaseModel):
    rows: list[ImportRow]


class ImportSuccess(BaseModel):
    email: str
    role: str


class ImportFailure(BaseModel):
    email: Optional[str] = None
    error: str


class BulkImportResponse(BaseModel):
    success: list[ImportSuccess]
    errors: list[ImportFailure]
