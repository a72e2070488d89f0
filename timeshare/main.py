from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from timeshare.config import settings
from timeshare.api.routes import router as api_router, inject_dependencies
from timeshare.services import MessageComposer
from timeshare.utils import get_logger

log = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    # ── startup ──
    log.info("🚀 Starting %s", settings.APP_NAME)

    inject_dependencies(MessageComposer())
    log.info("Message composer ready")

    yield

    # ── shutdown ──
    log.info("Goodbye 👋")


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(api_router)


def run():
    import uvicorn

    uvicorn.run("timeshare.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)


if __name__ == "__main__":
    run()
