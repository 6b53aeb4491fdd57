from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api.v1 import interview_access, interviews
from app.core.config import settings
from app.core.database import init_db
from app.core.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Interview Access API",
        description="Session admission and bookkeeping for paid AI mock interviews",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check
    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "ok"}

    # API Routers
    app.include_router(interview_access.router, prefix=settings.API_V1_PREFIX, tags=["Interview Access"])
    app.include_router(interviews.router, prefix=settings.API_V1_PREFIX, tags=["Interviews"])

    return app


app = create_app()
