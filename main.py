from typing import Awaitable, Callable

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from api.v1.routes import api_router
from core.config import settings
from core.logging_config import setup_logging
from core.lifespan import lifespan

setup_logging()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        response.headers["X-Method"] = request.method
        response.headers["X-Path"] = request.url.path
        return response


def create_app() -> FastAPI:
    fastapi_app: FastAPI = FastAPI(
        title=settings.APP_NAME,
        openapi_url="/acl.json",
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        lifespan=lifespan,
        debug=settings.ENVIRONMENT == "development",
        redirect_slashes=True,
        swagger_ui_parameters={
            "filter": True,
            "persistAuthorization": True,
            "docExpansion": "none",
            "displayRequestDuration": True,
        },
    )

    @fastapi_app.get("/", tags=["System"])
    async def root() -> dict[str, str]:
        return {
            "message": "Welcome to the Storefront Admin ACL API",
            "version": settings.VERSION,
            "docs_url": "/docs",
        }

    @fastapi_app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "message": "API is running fine!"}

    fastapi_app.include_router(api_router)

    fastapi_app.add_middleware(
        middleware_class=CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    fastapi_app.add_middleware(RequestLoggingMiddleware)

    @fastapi_app.exception_handler(HTTPException)
    async def handle_http_exceptions(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=(
                exc.detail
                if isinstance(exc.detail, dict)
                else {"message": str(exc.detail), "path": request.url.path}
            ),
            headers=getattr(exc, "headers", None),
        )

    return fastapi_app


app = create_app()


# Dev mode runner
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app="main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=True,
        use_colors=True,
    )
