import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from hankosign.config import get_settings
from hankosign.create_tables import create_tables
from hankosign.database import SessionLocal
from hankosign.seed import seed_demo_users
from hankosign.services.email_sender import EmailSender
from hankosign.services.storage_client import StorageClient

from hankosign.modules.workflows.job import start_overdue_reminder_job
from hankosign.modules.auth.controllers.auth_controller import router as auth_router
from hankosign.modules.users.controllers.user_controller import router as user_router
from hankosign.modules.users.controllers.admin_controller import router as admin_router
from hankosign.modules.hankos.controllers.hanko_controller import router as hanko_router
from hankosign.modules.documents.controllers.document_controller import router as document_router
from hankosign.modules.documents.controllers.signature_controller import router as signature_router
from hankosign.modules.documents.controllers.verify_controller import router as verify_router
from hankosign.modules.workflows.controllers.workflow_controller import router as workflow_router
from hankosign.modules.notifications.controllers.notification_controller import router as notification_router
from hankosign.modules.contact.controllers.contact_controller import router as contact_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    settings = get_settings()
    create_tables()
    logger.info("Database tables ready")

    if settings.SEED_DEMO_DATA:
        with SessionLocal() as session:
            seed_demo_users(session)

    scheduler = start_overdue_reminder_job() if settings.SCHEDULER_ENABLED else None
    yield
    # --- Shutdown ---
    if scheduler is not None:
        scheduler.shutdown(wait=False)
    logger.info("Application stopped")

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report the first violated constraint as a 400"""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return JSONResponse(status_code=400, content={"detail": message})

async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.APP_NAME,
        description="Digital hanko seals, document signing and public verification",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Accept", "Accept-Language", "Content-Type", "Authorization", "X-Requested-With"],
        max_age=86400,
    )

    # Clients shared by all requests
    app.state.storage = StorageClient(settings)
    app.state.email_sender = EmailSender(settings)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Routers
    for router in (
        auth_router,
        user_router,
        admin_router,
        hanko_router,
        document_router,
        signature_router,
        verify_router,
        workflow_router,
        notification_router,
        contact_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    return app

app = create_app()

if __name__ == "__main__":
    uvicorn.run("hankosign.main:app", host="0.0.0.0", port=8000, reload=True)
