import textwrap

from app.errors import FetchError, NotFoundError
from app.schemas.content import PostStub, RemoteDocument, StubPage
from app.services.pagination import paginate


def make_stub(slug: str, ext: str = ".md") -> PostStub:
    name = f"{slug}{ext}"
    return PostStub(
        slug=slug,
        name=name,
        path=f"src/content/blog/{name}",
        url=f"https://raw.example.test/{name}",
        htmlUrl=f"https://github.example.test/blob/main/{name}",
        sha=f"sha-{slug}",
        size=100,
    )


def post_markdown(
    title="Hello World",
    date="2024-06-01",
    summary="A summary",
    tags='["python", "web"]',
    body="# Hi\nSome *text*",
) -> str:
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if date is not None:
        lines.append(f"date: {date}")
    if summary is not None:
        lines.append(f"summary: {summary}")
    if tags is not None:
        lines.append(f"tags: {tags}")
    lines.append("---")
    lines.append(textwrap.dedent(body).strip())
    return "\n".join(lines) + "\n"


class FakeGateway:
    """
    In-memory stand-in for GitHubContentGateway.
    ``documents`` maps slug -> raw markdown; a value that is an Exception is raised on download.
    """

    def __init__(self, documents: dict):
        self.documents = documents
        self.downloads = []
        self.list_calls = []

    async def list_stubs(self):
        self.list_calls.append("all")
        return [make_stub(slug) for slug in sorted(self.documents, reverse=True)]

    async def list(self, page=1, page_size=5):
        self.list_calls.append((page, page_size))
        stubs = [make_stub(slug) for slug in sorted(self.documents, reverse=True)]
        items, total, has_more = paginate(stubs, page, page_size)
        return StubPage(items=items, total=total, hasMore=has_more)

    async def download(self, stub):
        self.downloads.append(stub.slug)
        value = self.documents[stub.slug]
        if isinstance(value, Exception):
            raise value
        return value

    async def fetch_one(self, slug):
        if slug not in self.documents:
            raise NotFoundError(f"Post '{slug}' not found")
        stub = make_stub(slug)
        try:
            content = await self.download(stub)
        except FetchError as e:
            raise NotFoundError(f"Post '{slug}' not found") from e
        return RemoteDocument(stub=stub, content=content)


class FakeRenderer:
    def __init__(self):
        self.calls = []

    def render(self, markdown: str) -> str:
        self.calls.append(markdown)
        return f"<rendered>{markdown}</rendered>"


class FakeContentService:
    """
    Minimal content service stand-in for router tests.
    """

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.queries = []

    async def fetch(self, query, cancel_token=None):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.result
