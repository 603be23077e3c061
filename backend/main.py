from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import gmpanel.models  # noqa: F401
from gmpanel.api.v1.api import api_router
from gmpanel.audit import create_storage
from gmpanel.core.config import settings
from gmpanel.core.i18n import BACKEND, Translator
from gmpanel.core.logging import configure_logging
from gmpanel.core.seed import ensure_seed_data
from gmpanel.db.session import SessionLocal

configure_logging(settings.LOG_LEVEL)


def seed_dev_data() -> None:
    db = SessionLocal()
    try:
        ensure_seed_data(db)
    finally:
        db.close()


def build_translator() -> Translator:
    translator = Translator()
    translator.add_messages(BACKEND, {"<unknown>": "<unknown>"})
    translator.add_messages("auth", {"{name}": "Authorization"})
    translator.add_messages("audit", {"{name}": "Audit log"})
    return translator


@asynccontextmanager
async def lifespan(app: FastAPI):
    # one storage backend shared by every request
    app.state.audit_storage = create_storage(settings.AUDIT_STORAGE)
    app.state.translator = build_translator()
    seed_dev_data()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/healthz")
def healthz():
    return {"status": "ok"}
