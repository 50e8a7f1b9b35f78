"""QR tag generation for the bed-tag printing page.

Endpoints:
    POST   /api/qr/generate    {qrCode, bedName} → PNG data URL + target URL
"""

import logging

from fastapi import APIRouter, Request

from smartseed.schemas.nursery import QRGenerateRequest, QRGenerateResponse
from smartseed.utils.qr import png_data_url, task_url

logger = logging.getLogger(__name__)

router = APIRouter()


def _public_base_url(request: Request) -> str:
    """Scheme and host as the client saw them (honours a TLS-terminating proxy)."""
    proto = request.headers.get("x-forwarded-proto", "http")
    host = request.headers.get("host", "localhost:3000")
    return f"{proto}://{host}"


@router.post("/generate", response_model=QRGenerateResponse)
async def generate_qr(body: QRGenerateRequest, request: Request):
    target = task_url(_public_base_url(request), body.qrCode)
    logger.info("QR generated for %s -> %s", body.bedName or body.qrCode, target)
    return QRGenerateResponse(
        qrCodeImage=png_data_url(target),
        targetUrl=target,
        qrCode=body.qrCode,
    )
