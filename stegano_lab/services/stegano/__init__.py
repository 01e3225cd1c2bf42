"""
Image Steganography Service - File Hiding

A steganography service supporting:
- Hiding one or more named files in a carrier image (1 LSB on R, G, B)
- Optional password-based encryption (scrypt + AES-GCM)
- Automatic carrier upscaling when capacity is insufficient
- Lossless PNG / WebP output
"""

from .core.service import ImageStegoService, hide, unveil

__version__ = "1.0.0"
__author__ = "Image Lab Team"

__all__ = ["ImageStegoService", "hide", "unveil"]
