import logging
import re
from typing import List, Optional

import httpx

from app.errors import ConfigurationError, FetchError, NotFoundError
from app.schemas.content import PostStub, RemoteDocument, StubPage
from app.services.pagination import MAX_PAGE_SIZE, paginate
from app.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"
DEFAULT_DIRECTORY = "src/content/blog"
DEFAULT_API_URL = "https://api.github.com"

MARKDOWN_EXTENSION = re.compile(r"\.(md|mdx)$", re.IGNORECASE)
_digits = re.compile(r"(\d+)")


def natural_key(name: str):
    """Sort key comparing digit runs numerically, e.g. post-2 < post-10."""
    return [
        (0, int(part), "") if part.isdecimal() else (1, 0, part.casefold())
        for part in _digits.split(name)
        if part
    ]


def strip_extension(name: str) -> str:
    return MARKDOWN_EXTENSION.sub("", name)


class GitHubContentGateway:
    """
    Lists and downloads markdown posts from one directory of a GitHub repo.
    Uses the contents API for listings and raw download urls for bodies.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        owner: str,
        repo: str,
        branch: str = DEFAULT_BRANCH,
        directory: str = DEFAULT_DIRECTORY,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
    ):
        if not owner or not repo:
            raise ConfigurationError(
                "Missing GitHub owner/repo. Set GITHUB_OWNER and GITHUB_REPO."
            )
        self.client = client
        self.owner = owner
        self.repo = repo
        self.branch = branch or DEFAULT_BRANCH
        self.directory = directory.strip("/")
        self.token = token or None
        self.api_url = api_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient):
        return cls(
            client,
            owner=settings.GITHUB_OWNER,
            repo=settings.GITHUB_REPO,
            branch=settings.GITHUB_BRANCH,
            directory=settings.GITHUB_DIRECTORY,
            token=settings.GITHUB_TOKEN,
            api_url=settings.GITHUB_API_URL,
        )

    @property
    def contents_url(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/contents/{self.directory}"

    def _headers(self) -> dict:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        # only attach a token when one was explicitly configured
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get(self, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.get(url, **kwargs)
        except httpx.HTTPError as e:
            raise FetchError(f"Request to {url} failed: {e}") from e
        if response.is_success:
            return response
        raise FetchError(
            f"GitHub request failed with {response.status_code} {response.reason_phrase}",
            status_code=response.status_code,
        )

    async def list_stubs(self) -> List[PostStub]:
        """Every markdown file in the directory, newest-looking name first."""
        response = await self._get(
            self.contents_url, params={"ref": self.branch}, headers=self._headers()
        )
        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(f"GitHub returned invalid JSON: {e}") from e
        if not isinstance(data, list):
            raise FetchError(f"Expected a directory listing at {self.directory}")

        files = [
            item
            for item in data
            if item.get("type") == "file"
            and MARKDOWN_EXTENSION.search(item.get("name", ""))
        ]
        files.sort(key=lambda item: natural_key(item["name"]), reverse=True)
        logger.debug(f"Found {len(files)} markdown files in {self.directory}")

        return [
            PostStub(
                slug=strip_extension(item["name"]),
                name=item["name"],
                path=item.get("path", ""),
                url=item.get("download_url") or "",
                htmlUrl=item.get("html_url") or "",
                sha=item.get("sha", ""),
                size=item.get("size", 0),
            )
            for item in files
        ]

    async def list(self, page: int = 1, page_size: int = MAX_PAGE_SIZE) -> StubPage:
        items, total, has_more = paginate(await self.list_stubs(), page, page_size)
        return StubPage(items=items, total=total, hasMore=has_more)

    async def download(self, stub: PostStub) -> str:
        if not stub.url:
            raise FetchError(f"No download url for {stub.name}")
        response = await self._get(stub.url, headers=self._raw_headers())
        return response.content.decode("utf-8", errors="replace")

    def _raw_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def fetch_one(self, slug: str) -> RemoteDocument:
        stub = next((s for s in await self.list_stubs() if s.slug == slug), None)
        if stub is None:
            raise NotFoundError(f"Post '{slug}' not found")
        try:
            content = await self.download(stub)
        except FetchError as e:
            logger.warning(f"Download failed for {stub.name}: {e}")
            raise NotFoundError(f"Post '{slug}' not found") from e
        return RemoteDocument(stub=stub, content=content)
