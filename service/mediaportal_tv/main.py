"""MediaPortal Live TV Service - Main entry point."""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from mediaportal_tv.api.routes import router
from mediaportal_tv.config import PLUGIN_VERSION, settings
from mediaportal_tv.livetv.errors import ProxyError, UnknownStreamIdError
from mediaportal_tv.livetv.service import MediaPortalTvService
from mediaportal_tv.proxy.mpextended import MPExtendedClient


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    proxy = MPExtendedClient(settings)
    app.state.live_tv = MediaPortalTvService(proxy=proxy, settings=settings)
    yield
    # Shutdown
    await proxy.aclose()


app = FastAPI(
    title="MediaPortal Live TV Service",
    description="Live TV service for Jellyfin backed by MediaPortal through MPExtended",
    version=PLUGIN_VERSION,
    lifespan=lifespan,
)

app.include_router(router, prefix="/api")


@app.exception_handler(UnknownStreamIdError)
async def unknown_stream_handler(request: Request, exc: UnknownStreamIdError):
    return JSONResponse(status_code=404, content={"detail": str(exc), "stream_id": exc.stream_id})


@app.exception_handler(ProxyError)
async def proxy_error_handler(request: Request, exc: ProxyError):
    return JSONResponse(status_code=502, content={"detail": str(exc), "method": exc.method})


@app.exception_handler(ValueError)
async def invalid_timer_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "mediaportal-tv"}


def main():
    """Run the service."""
    uvicorn.run(
        "mediaportal_tv.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
