import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

def now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    # sqlite hands back naive datetimes for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def minutes_from_now(minutes: int) -> datetime:
    return now() + timedelta(minutes=minutes)


def is_expired(value: Optional[datetime]) -> bool:
    if value is None:
        return False
    return now() > ensure_aware(value)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return ensure_aware(value).isoformat()


def generate_id(prefix: str) -> str:
    return f"{prefix}_{secrets.token_hex(12)}"


def generate_api_key() -> str:
    return f"agx_{secrets.token_hex(24)}"


def to_base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number == 0:
        return "0"
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


def build_error(code: str = "INTERNAL_ERROR",
                message: str = "Internal server error",
                details: Optional[Any] = None,
                request_id: Optional[str] = None) -> Dict[str, Any]:

    error: Dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    payload: Dict[str, Any] = {"success": False, "error": error}
    if request_id:
        payload["request_id"] = request_id
    return payload

def json_ok(content: Dict[str, Any], status_code: int = 200, headers=None) -> JSONResponse:
    return JSONResponse(content, status_code=status_code, headers=headers)

def json_error(content: Dict[str, Any], status_code: int = 500, headers=None) -> JSONResponse:
    return JSONResponse(content, status_code=status_code, headers=headers)
