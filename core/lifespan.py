import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from db.sessions.database import get_async_session_local, init_db, shutdown_db
from services.init_roles_permissions import build_privilege_registry, init_superadmin

logger = logging.getLogger("core.lifespan")


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        logger.info("Starting up FastAPI application...")

        # 1. Privilege mappings; read-only once the app serves requests
        app.state.privilege_registry = build_privilege_registry()
        logger.info(
            f"Privilege mappings ready ({len(app.state.privilege_registry)} entries)"
        )

        # 2. Database engine, tables and super admin seed
        await init_db()
        async with get_async_session_local()() as session:
            await init_superadmin(session)
        logger.info("Database initialized")

        yield

    except Exception as e:
        logger.exception(f"Startup failed: {e}")
        raise
    finally:
        await shutdown_db()
        logger.info("FastAPI application shutdown.")
