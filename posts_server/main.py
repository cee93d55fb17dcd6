from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn
from posts_server.app.routes.file_routes import router
from posts_server.app.services.storage_manager import StorageManager
from posts_server.app.services.upload_reader import UploadReader
from posts_server.config import ALLOWED_METHODS, ServerConfig
from posts_server.logger_config import setup_logger

# Logger setup
logger = setup_logger()


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Render HTTP errors as {"error": ...}; 405 gets an empty body and the Allow header."""
    if exc.status_code == 405:
        logger.info(f"Method {request.method} not allowed for {request.url.path}")
        return Response(status_code=405, headers={"Allow": ALLOWED_METHODS})

    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected with {exc.status_code}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


def create_app(config: ServerConfig) -> FastAPI:
    """Build the application for the given configuration."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create and initialize storage manager
        app.state.storage_manager = StorageManager(config.resources_dir, config.posts_dir)
        await app.state.storage_manager.initialize()
        app.state.upload_reader = UploadReader(config.max_upload_bytes)
        yield

    # Every path is a file path, so FastAPI's own documentation routes stay off
    app = FastAPI(
        title="Posts Server",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.include_router(router)
    return app


def main():
    config = ServerConfig.from_env()
    logger.info("Starting Posts Server...")
    logger.info(f"Resources directory: {config.resources_dir}")
    logger.info(f"Posts directory: {config.posts_dir}")
    logger.info(f"Maximum upload size: {config.max_upload_bytes} bytes")
    logger.info(f"Server listening on http://localhost:{config.port}")
    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
