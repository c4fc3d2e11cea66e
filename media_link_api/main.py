import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .config import DEFAULT_PLATFORM_TASKS, get_settings
from .errors import MediaLinkError
from .models import ErrorResponse
from .routers.platforms import create_router

logger = logging.getLogger(__name__)


def create_app(transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    """Build the API; ``transport`` replaces the network for outbound calls (tests)."""
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with httpx.AsyncClient(transport=transport, timeout=settings.http_timeout_seconds) as http:
            app.state.http = http
            yield

    app = FastAPI(title="Media Link API", version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MediaLinkError)
    async def media_link_error_handler(request: Request, exc: MediaLinkError):
        logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.code)
        body = ErrorResponse(error=exc.message, code=exc.code, details=exc.details)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Media link backend running"

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    for platform in DEFAULT_PLATFORM_TASKS:
        app.include_router(create_router(platform))

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Server listening on port %s", settings.port)
    uvicorn.run("media_link_api.main:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    run()
