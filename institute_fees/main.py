import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from institute_fees.api.v1.analytics.router import router as analytics_router
from institute_fees.api.v1.audit_logs.router import router as audit_logs_router
from institute_fees.api.v1.auth.router import router as auth_router
from institute_fees.api.v1.courses.router import router as courses_router
from institute_fees.api.v1.exports.router import router as exports_router
from institute_fees.api.v1.students.router import router as students_router
from institute_fees.api.v1.users.router import router as users_router
from institute_fees.core.config import settings


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Institute Fees Backend")

    # CORS: allow frontend to call this API
    origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(courses_router)
    app.include_router(students_router)
    app.include_router(analytics_router)
    app.include_router(audit_logs_router)
    app.include_router(exports_router)

    return app


app = create_app()
