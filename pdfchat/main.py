"""FastAPI model relay.

Run with: uvicorn pdfchat.main:app --port 3001
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pdfchat.api.routes.generate import router as generate_router
from pdfchat.api.routes.health import router as health_router
from pdfchat.api.routes.metrics import router as metrics_router
from pdfchat.config import get_settings
from pdfchat.utils.logging import configure_logging

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title="PDF Chat Relay", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.ui_origin],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(generate_router, tags=["generate"])


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies in the relay's {"error": ...} shape."""
    return JSONResponse(status_code=400, content={"error": "Invalid request body."})


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "PDF Chat Relay", "version": "0.1.0"}
