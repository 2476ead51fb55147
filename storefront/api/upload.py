"""
Upload API endpoints
Product/category images (admin) and payment proofs (shoppers)
"""

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from typing import Dict, Optional
from datetime import datetime
import os
import random
import logging

from storefront.config.defaults import ADMIN_IMAGE_EXTENSIONS, IMAGE_EXTENSIONS, MAX_UPLOAD_BYTES
from storefront.middleware.auth import require_auth
from storefront.api.schemas import UploadOut

logger = logging.getLogger(__name__)
router = APIRouter()

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
UPLOAD_URL_PREFIX = "/uploads"

def build_filename(field: str, ext: str) -> str:
    """<field>-<epoch ms>-<random><ext>, e.g. image-1760858400000-483920113.png"""
    timestamp = int(datetime.now().timestamp() * 1000)
    return f"{field}-{timestamp}-{random.randint(0, 999_999_999)}{ext}"

async def save_image(file: Optional[UploadFile], extensions: Dict[str, str] = IMAGE_EXTENSIONS,
                     field: str = "image") -> UploadOut:
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    # Extension comes from the checked content type, never the client filename
    ext = extensions.get(file.content_type)
    if ext is None:
        raise HTTPException(status_code=400, detail="Invalid file type. Only images are allowed.")

    contents = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(contents) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="File too large")
    if not contents:
        raise HTTPException(status_code=400, detail="No file uploaded")

    os.makedirs(UPLOAD_DIR, exist_ok=True)
    filename = build_filename(field, ext)
    file_path = os.path.join(UPLOAD_DIR, filename)
    with open(file_path, "wb") as buffer:
        buffer.write(contents)

    logger.info(f"Stored upload {filename} ({len(contents)} bytes, {file.content_type})")
    return UploadOut(
        success=True,
        url=f"{UPLOAD_URL_PREFIX}/{filename}",
        filename=filename,
        original_name=file.filename,
        size=len(contents)
    )

@router.post("/image", response_model=UploadOut, dependencies=[Depends(require_auth)])
async def upload_image(image: Optional[UploadFile] = File(None)):
    """Upload a catalog image (admin only)"""
    return await save_image(image, ADMIN_IMAGE_EXTENSIONS)

@router.post("/payment-proof", response_model=UploadOut)
async def upload_payment_proof(image: Optional[UploadFile] = File(None)):
    """Upload a transfer receipt from the checkout page (public)"""
    return await save_image(image)

@router.delete("/image/{filename}", dependencies=[Depends(require_auth)])
async def delete_image(filename: str):
    """Delete an uploaded file (admin only)"""
    upload_root = os.path.realpath(UPLOAD_DIR)
    file_path = os.path.realpath(os.path.join(upload_root, filename))

    # Only plain names directly inside the upload directory
    if os.path.dirname(file_path) != upload_root or not os.path.isfile(file_path):
        raise HTTPException(status_code=404, detail="File not found")

    os.remove(file_path)
    logger.info(f"Deleted upload {filename}")
    return {"success": True, "message": "File deleted"}
