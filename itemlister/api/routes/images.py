import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from itemlister.api.dependencies import get_services
from itemlister.api.services import Services
from itemlister.logging.logger import Log
from itemlister.processor.exceptions import InvalidImagePathError

router = APIRouter(prefix="/api/images", tags=["images"])


@router.post("")
def upload_image(image: UploadFile = File(...), services: Services = Depends(get_services)) -> dict:
    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Invalid file type. Only images are allowed.")
    content = image.file.read(services.settings.max_upload_bytes + 1)
    if len(content) > services.settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Image exceeds the upload size limit")
    try:
        filename = services.file_loader.save(image.filename or "", content)
    except InvalidImagePathError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    Log.info(f"Image uploaded: {filename} ({len(content)} bytes)")
    return {
        "sourceImageId": str(uuid.uuid4()),
        "filename": filename,
        "url": f"/uploads/{filename}",
        "size": len(content),
        "mimetype": image.content_type,
    }
