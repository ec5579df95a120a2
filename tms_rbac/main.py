import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tms_rbac.config import settings
from tms_rbac.errors import InvalidCredentials, OrganizationCycleError
from tms_rbac.logging_config import configure_logging, get_logger
from tms_rbac.routes.auth import router as auth_router
from tms_rbac.routes.health import router as health_router
from tms_rbac.routes.orgs import router as orgs_router
from tms_rbac.routes.permissions import router as permissions_router
from tms_rbac.routes.tasks import router as tasks_router

log = get_logger(__name__)

async def invalid_credentials_handler(_request: Request, exc: InvalidCredentials) -> JSONResponse:
    return JSONResponse(status_code=401, content={"detail": exc.message})

async def org_cycle_handler(_request: Request, exc: OrganizationCycleError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})

async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = dict()
    for error in exc.errors():
        if "loc" not in error or "msg" not in error:
            continue
        key = error["loc"][-1] if error["loc"] else "body"
        errors[str(key)] = error["msg"]
    log.info("request validation error %s", errors)
    return JSONResponse(status_code=400, content=jsonable_encoder({"detail": errors}))

def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="tms-rbac-api", version="0.1.0")
    app.add_exception_handler(InvalidCredentials, invalid_credentials_handler)
    app.add_exception_handler(OrganizationCycleError, org_cycle_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(orgs_router)
    app.include_router(permissions_router)
    app.include_router(tasks_router)

    log.info("app created")
    return app

app = create_app()

def run() -> None:
    uvicorn.run("tms_rbac.main:app", host=settings.app_host, port=settings.app_port)

if __name__ == "__main__":
    run()
