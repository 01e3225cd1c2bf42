"""
API routes for the Image Steganography Service
"""

import base64
import logging
from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse, Response

from ..core.errors import InsufficientCapacity, StegoError
from ..core.service import ImageStegoService
from ..models.stego_models import CapacityReport, StegoUnveilResult, UnveiledFile
from ..utils.image_utils import media_type
from .responses import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stego", tags=["stego"])

# Service instance
stego_service = ImageStegoService()


def send_error(status_code: int, message: str, details: Optional[dict] = None) -> JSONResponse:
    """
    Helper function to send consistent error responses

    Args:
        status_code: HTTP status code
        message: Error message
        details: Optional additional details

    Returns:
        JSONResponse with consistent format
    """
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, details=details).model_dump(),
    )


def error_response(exc: StegoError) -> JSONResponse:
    if isinstance(exc, InsufficientCapacity):
        return send_error(413, str(exc), {"required": exc.required, "available": exc.available})
    return send_error(400, str(exc))


@router.post("/capacity", response_model=CapacityReport)
async def check_capacity(
    file: UploadFile = File(...),
    secret_size: int = Form(0, ge=0),
    name_length: int = Form(0, ge=0),
    encrypted: bool = Form(False),
    estimate: bool = Form(False),
):
    """
    Check whether a secret of the given size fits a carrier

    Args:
        file: The carrier image
        secret_size: Secret size in bytes
        name_length: UTF-8 length of the secret's file name
        encrypted: Whether a password will be used
        estimate: Use the flat 1 KiB overhead estimate
    """
    try:
        return stego_service.capacity_report(
            await file.read(),
            data_len=secret_size,
            name_len=name_length,
            encrypted=encrypted,
            estimate=estimate,
        )
    except StegoError as e:
        logger.warning(f"Capacity check failed: {e}")
        return error_response(e)
    except Exception:
        logger.exception("Unexpected error in capacity check")
        return send_error(500, "Internal error while checking capacity")


@router.post("/hide")
async def hide_file(
    cover: UploadFile = File(...),
    secret: UploadFile = File(...),
    password: Optional[str] = Form(None),
    auto_resize: bool = Form(False),
    output_format: str = Form("png"),
):
    """
    Hide a file in a carrier image

    Args:
        cover: Carrier image
        secret: File to hide
        password: Optional password for encryption
        auto_resize: Upscale the carrier when it is too small
        output_format: png or webp

    Returns:
        The stego image in the requested format
    """
    try:
        cover_bytes = await cover.read()
        secret_bytes = await secret.read()
        logger.info(
            f"Received hide request: cover={cover.filename}, secret={secret.filename}, "
            f"secret_len={len(secret_bytes)}, encrypted={password is not None}, format={output_format}"
        )
        image_bytes, result = stego_service.hide(
            cover_bytes,
            secret.filename or "secret.bin",
            secret_bytes,
            password=password,
            auto_resize=auto_resize,
            output_format=output_format,
        )
        return Response(
            content=image_bytes,
            media_type=media_type(result.output_format),
            headers={
                "X-Stego-Width": str(result.width),
                "X-Stego-Height": str(result.height),
                "X-Stego-Resized": str(result.resized).lower(),
            },
        )
    except StegoError as e:
        logger.warning(f"Hide failed: {e}")
        return error_response(e)
    except Exception:
        logger.exception("Unexpected error in hide")
        return send_error(500, "Internal error while hiding data")


@router.post("/unveil", response_model=StegoUnveilResult)
async def unveil_files(
    file: UploadFile = File(...),
    password: Optional[str] = Form(None),
):
    """
    Recover hidden files from a stego image

    Returns:
        StegoUnveilResult, with an empty file list when nothing is found
    """
    try:
        contents = await file.read()
        logger.info(f"Received unveil request: filename={file.filename}, encrypted={password is not None}")
        entries = stego_service.unveil(contents, password=password)
        return StegoUnveilResult(
            files=[
                UnveiledFile(
                    name=entry.name,
                    size_bytes=len(entry.data),
                    data_base64=base64.b64encode(entry.data).decode("ascii"),
                )
                for entry in entries
            ]
        )
    except StegoError as e:
        logger.warning(f"Unveil failed: {e}")
        return error_response(e)
    except Exception:
        logger.exception("Unexpected error in unveil")
        return send_error(500, "Internal error while unveiling data")
