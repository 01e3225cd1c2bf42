from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stegano_lab.services.stegano.main import router as stego_router
from stegano_lab.utility.constants_manager import ConstantsManager

# Configure logging
logging.basicConfig(level=ConstantsManager().get_log_level())
logger = logging.getLogger(__name__)


app = FastAPI(title="Stegano Lab", version="1.0.0")

app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(stego_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
