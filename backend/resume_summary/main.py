import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, settings as default_settings
from .job_store import ResumeJobStore
from .logging_config import configure_logging
from .routes import router as routes_router
from .summarizer import GeminiSummarizer
from .worker import ResumeProcessor, Summarizer

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("%s started (model=%s)", app.title, app.state.settings.gemini_model)
    yield
    processor: ResumeProcessor = app.state.processor
    if processor.pending:
        logger.info("Waiting for %d resume(s) still processing", processor.pending)
        await processor.drain()


def create_app(
    settings: Settings | None = None,
    store: ResumeJobStore | None = None,
    summarizer: Summarizer | None = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store if store is not None else ResumeJobStore()
    app.state.processor = ResumeProcessor(
        app.state.store,
        summarizer if summarizer is not None else GeminiSummarizer.from_settings(settings),
    )

    # Add CORS middleware to allow frontend requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(routes_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
