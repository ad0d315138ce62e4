"""ComicGenius API application."""

from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from comicgenius_core_schemas import (
    GenerationError,
    NotFoundError,
    ServiceError,
    ValidationError,
    WizardError,
)
from .deps import Settings, configure
from .routes import (
    characters_router,
    comic_router,
    exports_router,
    jobs_router,
    sessions_router,
    story_router,
    style_router,
    videos_router,
    webhook_router,
    wizard_router,
)


def error_body(exc: ServiceError, **extra) -> dict:
    return {"error": {"code": exc.code, "message": exc.message, **extra}}


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: API settings (read from the environment if None)

    Returns:
        FastAPI application
    """
    if settings is None:
        load_dotenv()
        settings = Settings.from_env()
    configure(settings)

    app = FastAPI(
        title="ComicGenius API",
        description="""
Turn a short story into an illustrated comic.

## Workflow

1. Create a session (`POST /sessions`)
2. Write the story (`PUT /sessions/{id}/story`); characters are extracted automatically
3. Tag characters and upload reference photos (`/sessions/{id}/characters`)
4. Pick a style (`PUT /sessions/{id}/style`)
5. Generate the comic (`POST /sessions/{id}/comic`)
6. Export a PDF (`GET /sessions/{id}/export/pdf`) or animate panels
   (`POST /sessions/{id}/panels/{n}/video`)

## Async Operations

Comic, portrait and video generation return `202 Accepted` with a job
resource. Poll the job status endpoint (`GET /jobs/{id}`) for completion.
""",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=error_body(exc))

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content=error_body(exc, field=exc.field))

    @app.exception_handler(WizardError)
    async def wizard_handler(request: Request, exc: WizardError):
        return JSONResponse(
            status_code=409,
            content=error_body(exc, current_step=int(exc.current_step)),
        )

    @app.exception_handler(GenerationError)
    async def generation_handler(request: Request, exc: GenerationError):
        return JSONResponse(status_code=502, content=error_body(exc))

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(status_code=500, content=error_body(exc))

    # Register routers
    app.include_router(sessions_router)
    app.include_router(story_router)
    app.include_router(wizard_router)
    app.include_router(characters_router)
    app.include_router(style_router)
    app.include_router(comic_router)
    app.include_router(videos_router)
    app.include_router(exports_router)
    app.include_router(jobs_router)
    app.include_router(webhook_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


# Default app instance for uvicorn
app = create_app()
