from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coursefinder.api.routes import router as api_router
from coursefinder.core.config import settings
from coursefinder.core.database import engine
from coursefinder.core.logging import configure_logging
from coursefinder.models.base import Base
import coursefinder.models  # noqa: F401

app = FastAPI(title="CourseFinder API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.on_event("startup")
def on_startup():
    configure_logging(settings.log_level)
    Base.metadata.create_all(bind=engine)


@app.get("/health")
def health_check():
    return {"status": "ok"}
