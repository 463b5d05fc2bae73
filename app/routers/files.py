import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from app.core.config import Settings
from app.core.dependencies import get_settings
from app.core.storage import store_upload
from app.schemas import MessageResponse, UploadResult
from app.services import exceptions as service_exceptions

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])


@router.post("/upload", response_model=UploadResult, responses={400: {"model": MessageResponse}})
async def upload_file(
    file: Optional[UploadFile] = File(default=None),
    settings: Settings = Depends(get_settings),
) -> UploadResult:
    if file is None:
        raise service_exceptions.ValidationError("file is required")
    contents = await file.read()
    file_name = store_upload(settings.app.public_dir, contents)
    logger.info("Stored upload %s as %s (%d bytes)", file.filename, file_name, len(contents))
    return UploadResult(filename=file_name, originalname=file.filename or "")
