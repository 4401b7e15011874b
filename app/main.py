import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from app.routers import content
from app.services.highlighter import CodeHighlighter
from app.services.markdown_renderer import build_renderer
from app.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Folio Content API", description="Blog and thoughts content for the portfolio")


@asynccontextmanager
async def lifespan(app: FastAPI):
    highlighter = CodeHighlighter(style=settings.HIGHLIGHT_STYLE)
    app.state.highlighter = highlighter
    app.state.renderer = build_renderer(settings.MARKDOWN_RENDERER, highlighter)
    app.state.http_client = httpx.AsyncClient(
        timeout=settings.HTTP_TIMEOUT_SECONDS, follow_redirects=True
    )
    logger.info(f"Content API started with the {settings.MARKDOWN_RENDERER} markdown renderer")

    try:
        yield
    finally:
        await app.state.http_client.aclose()
        logger.info("HTTP client closed")


app.router.lifespan_context = lifespan

app.include_router(content.router)


@app.get("/")
async def root():
    return {"message": "Content API is running"}
