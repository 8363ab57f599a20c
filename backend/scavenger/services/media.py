from __future__ import annotations
import io
import uuid
from dataclasses import dataclass
from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError
import imagehash
from scavenger.errors import InvalidUpload


ALLOWED_MIME = {"image/jpeg", "image/png", "image/webp"}
EXT_FOR_MIME = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp"}
FORMAT_TO_MIME = {"JPEG": "image/jpeg", "PNG": "image/png", "WEBP": "image/webp"}

# Perceptual hashes closer than this are treated as the same picture
DUPLICATE_HAMMING_DISTANCE = 5


@dataclass(frozen=True)
class Photo:
    data: bytes
    mime: str
    phash: str

    @property
    def ext(self) -> str:
        return ext_for_mime(self.mime)


def sniff_mime(data: bytes) -> str | None:
    try:
        with Image.open(io.BytesIO(data)) as img:
            return FORMAT_TO_MIME.get(img.format)
    except (UnidentifiedImageError, OSError):
        return None

def analyze_image(data: bytes) -> tuple[str, str]:
    """
    Returns (mime, phash_hex).
    - mime: detected content-type (from the bytes, not the client's header)
    - phash_hex: perceptual hash hex string
    """
    mime = sniff_mime(data)
    if mime not in ALLOWED_MIME:
        raise ValueError("Unsupported image type")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()  # basic integrity
        with Image.open(io.BytesIO(data)) as img2:
            ph = imagehash.phash(img2)
        return mime, str(ph)
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValueError("Invalid image file")

def ext_for_mime(mime: str) -> str:
    return EXT_FOR_MIME.get(mime, "bin")

def hamming_hex(a: str, b: str) -> int:
    try:
        return bin(int(a, 16) ^ int(b, 16)).count("1")
    except ValueError:
        return 64  # treat as very different if bad data

async def read_photo(upload: UploadFile | None, max_bytes: int) -> Photo:
    """Read and validate an uploaded photo. Every failure is an InvalidUpload."""
    if upload is None:
        raise InvalidUpload("No photo uploaded")
    declared = (upload.content_type or "").lower()
    if declared and not declared.startswith("image/"):
        raise InvalidUpload("Only image files are allowed")
    data = await upload.read(max_bytes + 1)
    if not data:
        raise InvalidUpload("No photo uploaded")
    if len(data) > max_bytes:
        raise InvalidUpload(f"Photo exceeds the {max_bytes // (1024 * 1024)} MB limit")
    try:
        mime, phash = analyze_image(data)
    except ValueError as e:
        raise InvalidUpload(str(e))
    return Photo(data=data, mime=mime, phash=phash)

def photo_key(prefix: str, owner_id, item_id, photo: Photo) -> str:
    return f"{prefix}/{item_id}/teams/{owner_id}/{uuid.uuid4().hex}.{photo.ext}"
