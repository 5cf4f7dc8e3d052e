from typing import Optional
from fastapi import APIRouter, Depends, File, UploadFile

from api.deps import get_media_service, require_api_key
from core.exceptions import ValidationError
from services.media_service import MediaService

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.post("")
async def upload_media(
    file: Optional[UploadFile] = File(None),
    media: MediaService = Depends(get_media_service),
):
    """Store a fall clip and return its public URL."""
    if file is None:
        raise ValidationError("No file uploaded")

    # At most one byte past the limit.
    data = await file.read(media.max_bytes + 1)
    uploaded = await media.upload_video(data, file.filename)
    return {"ok": True, "mediaUrl": uploaded.media_url, "mediaId": uploaded.media_id}
