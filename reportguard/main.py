from contextlib import asynccontextmanager

from fastapi import FastAPI

from reportguard.accounts import router as accounts_router
from reportguard.config import get_settings
from reportguard.logging_config import configure_logging
from reportguard.reports import router as reports_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    yield


app = FastAPI(title="reportguard", lifespan=lifespan)

app.include_router(reports_router.router)
app.include_router(accounts_router.router)


@app.get("/health")
def health():
    return {"status": "ok"}
