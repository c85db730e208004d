# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from headhuntd.config import build_sqlalchemy_db_url, settings
from headhuntd.database import Base, engine
from headhuntd.errors import HeadHuntdError
from headhuntd.models import Job, SavedJob, Subscription, User  # noqa: F401  (register tables)
from headhuntd.api.routes.health import router as health_router
from headhuntd.routers import auth, jobs, onboarding, subscriptions, users


logger = logging.getLogger(__name__)


async def headhuntd_error_handler(request: Request, exc: HeadHuntdError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code, **exc.extra},
    )


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(HeadHuntdError, headhuntd_error_handler)

    # Health endpoints (do not depend on API_PREFIX)
    application.include_router(health_router)

    application.include_router(auth.router, prefix="/auth", tags=["auth"])
    application.include_router(users.router, prefix="/users", tags=["users"])
    application.include_router(onboarding.router)
    application.include_router(jobs.router)
    application.include_router(subscriptions.router)

    # Never auto-create tables on a shared MySQL database.
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
