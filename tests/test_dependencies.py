import httpx
import pytest

from app.dependencies import get_content_service
from app.errors import ConfigurationError
from app.services.content_service import ContentService
from app.services.github_gateway import GitHubContentGateway
from app.settings import Settings
from tests.conftest import FakeRenderer


def test_get_content_service_constructs_service():
    renderer = FakeRenderer()
    svc = get_content_service(
        client=httpx.AsyncClient(),
        renderer=renderer,
        current_settings=Settings(GITHUB_OWNER="octo", GITHUB_REPO="site"),
    )

    assert isinstance(svc, ContentService)
    assert svc.renderer is renderer


def test_gateway_factory_builds_gateway_from_settings():
    client = httpx.AsyncClient()
    svc = get_content_service(
        client=client,
        renderer=FakeRenderer(),
        current_settings=Settings(GITHUB_OWNER="octo", GITHUB_REPO="site", GITHUB_TOKEN="t"),
    )

    gateway = svc.gateway_factory()

    assert isinstance(gateway, GitHubContentGateway)
    assert gateway.client is client
    assert (gateway.owner, gateway.repo, gateway.token) == ("octo", "site", "t")


def test_gateway_factory_without_source_raises_only_when_called():
    svc = get_content_service(
        client=httpx.AsyncClient(),
        renderer=FakeRenderer(),
        current_settings=Settings(GITHUB_OWNER="", GITHUB_REPO=""),
    )

    with pytest.raises(ConfigurationError):
        svc.gateway_factory()
