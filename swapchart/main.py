import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import FileResponse

from swapchart.api.deps import close_chain_provider, get_chain_provider
from swapchart.api.routes import router as api_router
from swapchart.config import get_settings

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

STATIC_DIR = Path(__file__).resolve().parent / "static"

app = FastAPI(title="Swap Chart API", version="0.1.0")
app.include_router(api_router)


@app.on_event("shutdown")
async def _shutdown():
    await close_chain_provider()


@app.get("/", include_in_schema=False)
def index():
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/health")
def health():
    return {
        "status": "ok",
        "app_env": settings.app_env,
        "provider_config": settings.provider,
        "provider_loaded": get_chain_provider().__class__.__name__,
    }
