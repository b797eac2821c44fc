"""
Askdata — natural-language data agent
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import health, query, spa
from config import settings

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger("askdata")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Askdata starting up…")
    yield
    logger.info("Askdata shutting down.")


# ── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="Askdata — Natural-Language Data Agent",
    description="Ask business questions in plain language; get SQL, rows, charts and an explanation.",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS ──────────────────────────────────────────────────────────────────────
origins = settings.cors_origin_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(health.router, prefix="/api")
app.include_router(query.router,  prefix="/api")
app.include_router(spa.router)   # must stay last: catches every other GET


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.API_HOST, port=settings.API_PORT)
