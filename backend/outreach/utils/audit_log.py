from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Literal, Optional

from ..domain.entities import OperatorContext
from .request_id import get_request_id

AuditAction = Literal[
    "venue.created",
    "venue.updated",
    "venue.deleted",
    "performance.created",
    "reservation.created",
]

_audit_logger = logging.getLogger("audit")
_audit_logger.setLevel(logging.INFO)
if not _audit_logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    _audit_logger.addHandler(handler)
_audit_logger.propagate = False


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if hasattr(value, "value"):
        return str(value.value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def emit_audit_log(
    *,
    action: AuditAction,
    operator: OperatorContext,
    venue_id: Optional[int] = None,
    performance_id: Optional[int] = None,
    reservation_id: Optional[int] = None,
    attendees: Optional[int] = None,
    message: Optional[str] = None,
    extra: Optional[dict[str, Any]] = None,
) -> None:
    """Emit structured JSON audit log. Raises RuntimeError if logging fails."""
    payload: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": "info",
        "action": action,
        "request_id": get_request_id(),
        "user_id": operator.user_id,
        "role": _jsonable(operator.role),
        "venue_id": venue_id,
        "performance_id": performance_id,
        "reservation_id": reservation_id,
        "attendees": attendees,
    }
    if message is not None:
        payload["message"] = message
    if extra:
        payload.update({key: _jsonable(value) for key, value in extra.items()})

    # Drop None values to keep the log compact.
    compact_payload = {k: v for k, v in payload.items() if v is not None}
    try:
        _audit_logger.info(json.dumps(compact_payload, ensure_ascii=True))
    except Exception as exc:
        raise RuntimeError("failed to emit audit log") from exc
