import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from rosterapp.config import settings
from rosterapp.logging_config import setup_logging
from rosterapp.routers import auth, calendar, maps, plans, players

setup_logging(settings.log_level)
logger = logging.getLogger("rosterapp.http")

app = FastAPI(
    title="Roster Balancer",
    description="Team roster balancing, rotations and match calendar",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "[%s] %s - %s (%.0fms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(auth.router)
app.include_router(players.router)
app.include_router(maps.router)
app.include_router(plans.router)
app.include_router(calendar.router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
