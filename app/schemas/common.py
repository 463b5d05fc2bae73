from typing import Any

from pydantic import BaseModel


class HealthStatus(BaseModel):
    ok: bool
    db: bool


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str


class MessageResponse(BaseModel):
    message: str


class UploadResult(BaseModel):
    filename: str
    originalname: str


class PageDiagnostics(BaseModel):
    indexPath: str
    headerPath: str
    footerPath: str
    exists: dict[str, Any]
