"""API router for attachment uploads."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile

from memobbs.core.errors import bad_request, internal_error
from memobbs.resources.schemas import ResourceUploaded
from memobbs.resources.storage import ResourceStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resources", tags=["Resources"])


def get_resource_store(request: Request) -> ResourceStore:
    return request.app.state.resource_store


ResourceStoreDep = Annotated[ResourceStore, Depends(get_resource_store)]


@router.post("", response_model=ResourceUploaded)
def upload_resource(
    store: ResourceStoreDep,
    file: Optional[UploadFile] = File(None),
) -> ResourceUploaded:
    """Store an uploaded file and return its public URL."""
    if file is None or not file.filename:
        raise bad_request("No file uploaded")

    try:
        stored = store.save(file.file, file.filename, file.content_type)
    except OSError as e:
        logger.error(f"Error uploading file {file.filename!r}: {e}")
        raise internal_error("Failed to upload file") from e
    finally:
        file.file.close()

    return ResourceUploaded.model_validate(stored)
