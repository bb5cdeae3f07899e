from contextlib import asynccontextmanager
import os
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from loguru import logger
from chatrelay.api.router import api_router
from chatrelay.core.config import settings
from chatrelay.core.errors import GatewayError, InvalidRequest
from chatrelay.core.logging import configure_logging
from chatrelay.core.providers import get_provider_config
from chatrelay.services.llm_gateway import MESSAGE_REQUIRED

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(_: FastAPI):
    provider = get_provider_config()
    logger.info('server.start', env=settings.ENV, provider=provider.host, model=provider.model)
    yield
    logger.info('server.stop')

app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG, lifespan=lifespan)

allow_origins = settings.CORS_ORIGINS
allow_credentials = '*' not in allow_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=allow_credentials,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error('api.error', path=request.url.path, error=exc.error, details=exc.details)
    else:
        logger.info('api.rejected', path=request.url.path, error=exc.error)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await gateway_error_handler(request, InvalidRequest(MESSAGE_REQUIRED))


app.include_router(api_router)


def _get_frontend_dist() -> Path:
    env_path = os.getenv("FRONTEND_DIST")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return Path(__file__).resolve().parents[1] / "public"


frontend_dist = _get_frontend_dist()
index_file = frontend_dist / "index.html"

if frontend_dist.exists() and index_file.exists():

    @app.get("/", include_in_schema=False)
    def serve_frontend_index():
        return FileResponse(index_file)

    @app.get("/{full_path:path}", include_in_schema=False)
    def serve_frontend_assets(full_path: str):
        if full_path.startswith("api/"):
            raise HTTPException(status_code=404)
        candidate = (frontend_dist / full_path).resolve()
        if candidate.is_file() and candidate.is_relative_to(frontend_dist):
            return FileResponse(candidate)
        return FileResponse(index_file)
