from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from release_builder.api import auth, dashboard, labels, media, reference, releases, tracks, users, wizard
from release_builder.core.config import settings
import traceback
import logging
import uvicorn # For running programmatically
import os # For path manipulation


# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("release_builder")
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

app = FastAPI(title="Release Builder API", debug=settings.DEBUG)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Unexpected errors: log the traceback, only send it back in debug mode
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    error_detail = traceback.format_exc()
    logger.error(f"Unhandled exception on {request.url.path}: {str(exc)}\n{error_detail}")
    content = {"detail": "Internal server error", "path": request.url.path}
    if settings.DEBUG:
        content["error"] = str(exc)
        content["traceback"] = error_detail
    return JSONResponse(status_code=500, content=content)

# Include routes
app.include_router(auth.router, prefix="/api", tags=["Authentication"])
app.include_router(releases.router, prefix="/api", tags=["releases"])
app.include_router(media.router, prefix="/api", tags=["media"])
app.include_router(tracks.router, prefix="/api", tags=["tracks"])
app.include_router(wizard.router, prefix="/api", tags=["wizard"])
app.include_router(labels.router, prefix="/api", tags=["labels"])
app.include_router(users.router, prefix="/api", tags=["users"])
app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])
app.include_router(reference.router, prefix="/api", tags=["reference"])

# Uploaded objects, served from the local storage root
os.makedirs(settings.STORAGE_ROOT, exist_ok=True)
app.mount("/storage", StaticFiles(directory=settings.STORAGE_ROOT), name="storage")


@app.get("/")
async def root():
    return {"message": "Welcome to the Release Builder API"}


if __name__ == "__main__":
    # For deployment, use 0.0.0.0 and PORT from environment
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, log_level=settings.LOG_LEVEL.lower())
