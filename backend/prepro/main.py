from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from prepro.core.config import settings
from prepro.core.exceptions import PreProError
from prepro.core.logging import get_logger
from prepro.db import Base, engine
from prepro import models  # noqa: F401  registers tables on Base
from prepro.api.routes import health, projects, shots, references

logger = get_logger("api")

# Create DB tables on startup (for dev; later replace with Alembic)
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.PROJECT_NAME)


@app.exception_handler(PreProError)
def handle_prepro_error(request: Request, exc: PreProError):
    if exc.status_code >= 500:
        logger.error(f"[API] {request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"[API] {request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


app.include_router(health.router, prefix=settings.API_V1_PREFIX)
app.include_router(projects.router, prefix=settings.API_V1_PREFIX)
app.include_router(shots.router, prefix=settings.API_V1_PREFIX)
app.include_router(references.router, prefix=settings.API_V1_PREFIX)
