"""
Mock-Me - Main FastAPI Application

This is the entry point for the interview practice API.
"""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from mock_me.core.auth import get_current_user
from mock_me.core.config import get_settings
from mock_me.core.database import mongodb_client
from mock_me.core.storage import audio_store
from mock_me.api import health, users, interviews, voice_interview
from mock_me.api.errors import register_error_handlers
from mock_me.api.static import AudioStaticFiles
from mock_me.providers.llm import get_llm_provider
from mock_me.providers.stt import get_stt_provider
from mock_me.providers.tts import get_tts_provider
from mock_me.services.housekeeping import Housekeeper
from mock_me.services.interviews import get_interview_service
from mock_me.services.session_store import SessionStore
from mock_me.services.users import get_user_service
from mock_me.services.voice_interview_orchestrator import init_voice_orchestrator

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting Mock-Me API...")

    await mongodb_client.connect()
    await mongodb_client.ensure_schema()
    logger.info("MongoDB connection established")

    await audio_store.initialize()

    tts_provider = get_tts_provider()
    stt_provider = get_stt_provider()
    session_store = SessionStore()
    orchestrator = init_voice_orchestrator(
        session_store=session_store,
        user_service=get_user_service(),
        interview_service=get_interview_service(),
        tts_provider=tts_provider,
        stt_provider=stt_provider,
        feedback_in_background=settings.feedback_in_background,
    )
    logger.info(f"Voice interview ready (tts={tts_provider.name}, stt={stt_provider.name})")

    housekeeper = Housekeeper(
        session_store=session_store,
        asset_store=audio_store,
        session_ttl_minutes=settings.session_ttl_minutes,
        audio_retention_hours=settings.audio_retention_hours,
        interval_seconds=settings.housekeeping_interval_seconds,
    )
    housekeeper.start()

    yield

    # Shutdown
    logger.info("Shutting down Mock-Me API...")
    await housekeeper.stop()
    await orchestrator.drain_feedback()
    await tts_provider.close()
    await stt_provider.close()
    await get_llm_provider().close()
    await mongodb_client.disconnect()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Interview practice API with spoken voice interviews",
        version=health.VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else settings.cors_origins,
        allow_credentials=not settings.debug,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        elapsed_ms = (time.time() - start) * 1000
        logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.0f}ms")
        return response

    register_error_handlers(app)

    protected = [Depends(get_current_user)]

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(users.router, prefix="/api/v1/users", tags=["Users"], dependencies=protected)
    app.include_router(interviews.router, prefix="/api/v1/interview", tags=["Interviews"], dependencies=protected)
    app.include_router(
        voice_interview.router,
        prefix="/api/v1/voice-interview",
        tags=["Voice Interview"],
        dependencies=protected,
    )

    app.mount(
        "/uploads",
        AudioStaticFiles(directory=str(audio_store.uploads_dir), check_dir=False),
        name="uploads",
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "mock_me.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
