"""
API response models for the Image Steganography Service
"""

from pydantic import BaseModel
from typing import Any, Dict, Optional


class ErrorResponse(BaseModel):
    """
    Standard error response model
    """
    success: bool = False
    error: str
    details: Optional[Dict[str, Any]] = None
