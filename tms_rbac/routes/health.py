from fastapi import APIRouter
from fastapi.responses import JSONResponse

from tms_rbac.db import db_ping
from tms_rbac.logging_config import get_logger
from tms_rbac.redis_client import redis_ping

router = APIRouter(tags=["health"])

log = get_logger(__name__)

@router.get("/health")
def health() -> dict:
    return {"status": "ok"}

# readiness probe
@router.get("/ready")
def ready():
    checks: dict[str, bool] = {}
    errors: dict[str, str] = {}

    for name, fn in (("db", db_ping), ("redis", redis_ping)):
        try:
            checks[name] = bool(fn())
        except Exception as e:
            checks[name] = False
            msg = str(e).strip()
            errors[name] = f"{e.__class__.__name__}{(': ' + msg) if msg else ''}"

    ok = all(checks.values())
    if not ok:
        log.warning("readiness failed: %s", checks)

    body: dict = {"status": "ok" if ok else "unready", "checks": checks}
    if errors:
        body["errors"] = errors

    # 200 only when db + redis are reachable, else 503 with details
    return JSONResponse(status_code=200 if ok else 503, content=body)
