from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

from config import Settings, get_settings
from store import Store
from schemas import HealthResponse
from api import rooms, posts

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Store 在 create_app 時已經建立（空的），這裡只記錄設定
    settings = app.state.settings
    logger.info(
        f"{settings.app_name} ready (prefix='{settings.api_prefix}', "
        f"tie_mode={settings.tally_tie_mode}, code_length={settings.room_code_length})"
    )
    yield
    # Shutdown: 所有狀態都在記憶體裡，程序結束就釋放
    logger.info(f"{settings.app_name} shutting down")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )

    app = FastAPI(
        title=settings.app_name,
        description="Backend API for the technique building and voting party game",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.store = Store.from_settings(settings)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                too_large = int(content_length) > settings.max_body_bytes
            except ValueError:
                return JSONResponse(status_code=400, content={"error": "Invalid Content-Length"})
            if too_large:
                logger.warning(f"Rejected {request.method} {request.url.path}: body {content_length} bytes")
                return JSONResponse(status_code=413, content={"error": "Request body too large"})
        return await call_next(request)

    # 錯誤一律用 { "error": message } 回傳
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal error"})

    # Include routers
    app.include_router(rooms.router, prefix=settings.api_prefix)
    app.include_router(posts.router, prefix=settings.api_prefix)

    @app.get(f"{settings.api_prefix}/health", response_model=HealthResponse)
    def health(request: Request):
        store: Store = request.app.state.store
        return HealthResponse(
            ok=True,
            room_count=store.rooms.room_count(),
            post_count=store.posts.post_count()
        )

    # 靜態檔案最後掛，避免蓋掉 API 路由
    if settings.static_dir:
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
