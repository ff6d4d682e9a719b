"""
Normalisation of gateway response bodies.

The gateway reports connection state under `instance.state` or
`instance.status` with arbitrary casing, and the QR image either at the top
level (`base64`) or nested under `qrcode.base64`. Everything downstream works
with a single ConnectSnapshot instead.
"""

from dataclasses import dataclass
from typing import Any, Optional

from salesbot.models.channel import GatewayConnectionState


@dataclass(frozen=True)
class ConnectSnapshot:
    state: GatewayConnectionState
    raw_status: str
    qr_code: Optional[str] = None


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def extract_qr_code(body: Any) -> Optional[str]:
    """Return the image-encoded QR code from a create or connect body."""
    body = _as_dict(body)
    return _non_empty_str(body.get("base64")) or _non_empty_str(
        _as_dict(body.get("qrcode")).get("base64")
    )


def parse_connect_body(body: Any) -> ConnectSnapshot:
    """
    Reduce a connect/status response body to one canonical state.

    `instance.state` takes precedence over `instance.status`. A body with no
    state but a QR image is reported as QRCODE.
    """
    instance = _as_dict(_as_dict(body).get("instance"))
    qr_code = extract_qr_code(body)

    raw = _non_empty_str(instance.get("state")) or _non_empty_str(instance.get("status"))
    if raw is None:
        raw = "qrcode" if qr_code else "unknown"
    raw = raw.lower()

    try:
        state = GatewayConnectionState(raw)
    except ValueError:
        state = GatewayConnectionState.UNKNOWN

    return ConnectSnapshot(state=state, raw_status=raw, qr_code=qr_code)
