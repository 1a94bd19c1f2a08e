"""classroll — FastAPI Application Entry Point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from classroll.config import settings
from classroll.database import engine, Base
from classroll.errors import register_exception_handlers
from classroll.middleware.rate_limit import limiter
from classroll.routers import auth, users, teachers, courses, classes, enrollments
from classroll import models  # noqa: F401  (registers tables on Base.metadata)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
        datefmt="%H:%M:%S",
    )


configure_logging()
logger = logging.getLogger(__name__)

# Create all tables on startup
Base.metadata.create_all(bind=engine)

# ── CORS origins from env (supports dev localhost + production domain) ──────
_cors_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

app = FastAPI(
    title="classroll",
    description="API for managing users, teachers, courses, classes and enrollments.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Error rendering + X-Request-Id
register_exception_handlers(app)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=86400,
)

# Routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(teachers.router)
app.include_router(courses.router)
app.include_router(classes.router)
app.include_router(enrollments.router)


@app.get("/")
def root():
    return {
        "name": "classroll",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("classroll.main:app", host="127.0.0.1", port=8000, reload=True)
