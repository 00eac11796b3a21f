# main.py
import os
from typing import Optional
from fastapi import FastAPI

from signed_cookies.core.config import settings
from signed_cookies.core.exception_handlers import setup_exception_handlers
from signed_cookies.middleware.cookie_middleware import CookieMiddleware
from signed_cookies.routers import cookies
from signed_cookies.services.cookie_service import CookieService


def create_app(
    service: Optional[CookieService] = None,
    trust_forwarded_proto: Optional[bool] = None,
) -> FastAPI:
    if trust_forwarded_proto is None:
        trust_forwarded_proto = settings.cookie_trust_forwarded_proto

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Signed cookie parsing, signing and Set-Cookie serialization",
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
    )

    setup_exception_handlers(app)
    app.add_middleware(CookieMiddleware, service=service, trust_forwarded_proto=trust_forwarded_proto)
    app.include_router(cookies.router)

    @app.get("/api/health")
    async def health_check():
        return {"status": "healthy", "app_name": settings.app_name, "version": settings.app_version, "debug": settings.debug}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        log_level="debug" if settings.debug else "info",
    )
