import httpx
from fastapi import Depends, Request

from app.services.content_service import ContentService
from app.services.github_gateway import GitHubContentGateway
from app.services.highlighter import CodeHighlighter
from app.settings import Settings, settings


def get_settings() -> Settings:
    """Small wrapper to allow dependency overrides in tests."""
    return settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_highlighter(request: Request) -> CodeHighlighter:
    return request.app.state.highlighter


def get_renderer(request: Request):
    return request.app.state.renderer


def get_content_service(
    client=Depends(get_http_client),
    renderer=Depends(get_renderer),
    current_settings: Settings = Depends(get_settings),
):
    # the gateway is built lazily so the thoughts domain works without GitHub config
    return ContentService(
        gateway_factory=lambda: GitHubContentGateway.from_settings(current_settings, client),
        renderer=renderer,
    )
