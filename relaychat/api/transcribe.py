"""Audio upload endpoint for speech-to-text.

Handles file upload, validation and forwarding to the transcription model.
"""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from relaychat.agent.upstream import get_upstream_service
from relaychat.models.schemas import TranscriptionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["transcribe"])

# Upstream transcription limit
MAX_UPLOAD_SIZE = 25 * 1024 * 1024

DEFAULT_FILENAME = "audio.webm"
DEFAULT_CONTENT_TYPE = "audio/webm"


async def _read_and_validate_size(file: UploadFile) -> bytes:
    """Read file content and validate size.

    Args:
        file: The uploaded file.

    Returns:
        File content as bytes.

    Raises:
        HTTPException: 400 if empty, 413 if the file exceeds the size limit.
    """
    content = await file.read()

    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Audio file is empty",
        )

    if len(content) > MAX_UPLOAD_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum allowed (25MB)",
        )

    return content


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe(audio: UploadFile | None = File(None)) -> TranscriptionResponse:
    """Transcribe one uploaded audio clip.

    Args:
        audio: The recorded clip (multipart field ``audio``).

    Returns:
        TranscriptionResponse with the transcript text.

    Raises:
        400: Missing or empty audio file.
        413: File exceeds 25MB limit.
        500: Missing credentials or upstream failure.
    """
    if audio is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Audio file is required",
        )

    content = await _read_and_validate_size(audio)
    service = get_upstream_service()

    text = await service.transcribe(
        content,
        filename=audio.filename or DEFAULT_FILENAME,
        content_type=audio.content_type or DEFAULT_CONTENT_TYPE,
    )
    logger.info(f"Transcribed audio clip ({len(content)} bytes)")
    return TranscriptionResponse(text=text)
