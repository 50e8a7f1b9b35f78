"""QR code rendering for bed tags."""

import io

import segno

from smartseed.config import settings


def task_url(base_url: str, qr_code: str) -> str:
    """URL a scanned bed tag opens: the task checklist for that bed."""
    return f"{base_url.rstrip('/')}{settings.qr_target_path}?qr={qr_code}"


def png_data_url(content: str) -> str:
    """High error-correction PNG as a ``data:image/png;base64,...`` URL."""
    qr = segno.make_qr(content, error="h")
    return qr.png_data_uri(
        scale=settings.qr_scale,
        border=settings.qr_border,
        dark="#000000",
        light="#ffffff",
    )


def svg_bytes(content: str) -> bytes:
    qr = segno.make_qr(content, error="h")
    buf = io.BytesIO()
    qr.save(buf, kind="svg", scale=4, dark="#15803d")
    return buf.getvalue()
