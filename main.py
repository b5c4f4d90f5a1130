from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.deps import get_current_user
from api.errors import register_exception_handlers
from api.v1 import contacts, income, info
from core.config import settings
from core.firebase import initialize_firebase
from core.logging_config import setup_logging

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.STORE_BACKEND == "firestore":
        initialize_firebase()
    yield


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Records API", version=VERSION, lifespan=lifespan)

    # Налаштування CORS (щоб фронтенд мав доступ)
    origins = [o.strip() for o in settings.FRONTEND_ORIGIN.split(",") if o.strip()] or [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # --- ПІДКЛЮЧЕННЯ РОУТЕРІВ ---
    private = [Depends(get_current_user)]
    app.include_router(contacts.router, prefix="/api/v1/contacts", tags=["Contacts"], dependencies=private)
    app.include_router(income.router, prefix="/api/v1/income", tags=["Income"], dependencies=private)
    app.include_router(info.router, prefix="/api/v1/info", tags=["Info"], dependencies=private)

    @app.get("/")
    def read_root():
        return {"status": "ok", "version": VERSION}

    return app


app = create_app()
