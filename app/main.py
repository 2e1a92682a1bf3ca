import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.routers import auth, documents, users
from app.services.errors import LifecycleError, TooManyAttempts

logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create schema, integrity-check, seed demo principals
    from app.database import SessionLocal, check_integrity, init_db
    from app.services.user_service import seed_demo_users

    init_db()
    result = check_integrity()
    if result == "ok":
        logger.info("Database integrity check passed.")
    else:
        logger.error("DATABASE INTEGRITY CHECK FAILED: %s", result)

    if settings.seed_demo_data:
        db = SessionLocal()
        try:
            seed_demo_users(db)
        finally:
            db.close()
    yield
    # Shutdown: drop all sessions
    from app.services.auth_service import auth_service
    auth_service.logout_all()


app = FastAPI(
    title="E-Sign Demo",
    description="Mock electronic-signature workflow: send, review and sign documents",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LifecycleError)
async def lifecycle_error_handler(request: Request, exc: LifecycleError):
    headers = None
    if isinstance(exc, TooManyAttempts):
        headers = {"Retry-After": str(int(exc.retry_after_seconds) + 1)}
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(documents.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
