from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def bootstrap_access_control():
    """Seed the permission catalog and system roles, then backfill legacy memberships"""
    from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
    from src.app.use_cases.bootstrap import (
        BackfillLegacyMembershipsUseCase,
        SeedAccessControlUseCase,
    )
    from src.depends import AsyncSessionLocal

    async with AsyncSessionLocal() as session:
        seeded = await SeedAccessControlUseCase(SqlAlchemyUnitOfWork(session)).execute()
    async with AsyncSessionLocal() as session:
        backfill = await BackfillLegacyMembershipsUseCase(SqlAlchemyUnitOfWork(session)).execute()

    logger.info(
        f"Access control bootstrapped: permissions={seeded.permissions} roles={seeded.roles} "
        f"grants={seeded.grants} backfilled={backfill.created}"
    )


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.BOOTSTRAP_ON_STARTUP:
            await bootstrap_access_control()
        yield

    app = FastAPI(title="Access Control API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import audit, health_check, rbac, roles, staff

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(rbac.router, tags=["RBAC"])
    app.include_router(roles.router, tags=["Roles"])
    app.include_router(staff.router, tags=["Staff"])
    app.include_router(audit.router, tags=["Audit"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
