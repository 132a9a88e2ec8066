import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .errors import AssessmentError, InvalidMetricsError
from .routes.assessment import router as assessment_router


# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):

    # Startup
    print("Starting Strategic Assessment Engine")
    print(f"   OpenAI Key:  {' Configured' if os.getenv('OPENAI_API_KEY') else ' Not set (idea scoring disabled)'}")
    print(f"   Debug:       {settings.debug}")
    print("   Ready to assess startup ideas!")

    yield

    print("Shutting down Strategic Assessment Engine")


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(assessment_router)


@app.get(
    "/",
    summary="API Root",
    description="Welcome endpoint with API information",
    tags=["General"]
)
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "description": "Deterministic risk, readiness and roadmap assessment for startup ideas",
        "docs": "/docs",
        "endpoints": {
            "evaluate": "POST /assessment/evaluate - Assess a metric vector and stage",
            "score": "POST /assessment/score - Score an idea description and assess it",
            "phases": "GET /assessment/phases - Roadmap phase catalog",
            "health": "GET /health - Service health check"
        }
    }


@app.get(
    "/health",
    summary="Global Health Check",
    description="Check if the API server is running",
    tags=["General"]
)
async def health():
    """Global health check endpoint."""
    return {
        "status": "healthy",
        "service": "startup-strategic-assessment",
        "version": settings.version
    }


@app.exception_handler(AssessmentError)
async def assessment_exception_handler(request: Request, exc: AssessmentError):
    """Invalid metrics or stage reaching the engine outside request validation."""
    detail = exc.problems if isinstance(exc, InvalidMetricsError) else str(exc)
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": type(exc).__name__,
            "detail": detail,
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "startup_assessment.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
