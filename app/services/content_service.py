import asyncio
import datetime
import logging
from typing import Callable, List, Optional, Union

from app.content.thoughts import THOUGHTS
from app.errors import ContentError, NotFoundError, ParseError, QueryCancelledError
from app.schemas.content import (
    BlogPost,
    ContentItem,
    ContentList,
    ContentQuery,
    PostStub,
    ThoughtPost,
)
from app.services.frontmatter_parser import missing_required_fields, parse_frontmatter
from app.services.github_gateway import GitHubContentGateway
from app.services.pagination import paginate, search_matches
from app.services.toc import extract_toc
from app.utils import estimate_reading_time, round_half_up, slugify

logger = logging.getLogger(__name__)

DEFAULT_READING_TIME = 5


class CancellationToken:
    """
    Caller-owned flag checked after every await of a query.
    Cancelling does not abort requests already in flight; their results are dropped.
    """

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise QueryCancelledError("Query was cancelled")


class ContentService:
    def __init__(
        self,
        gateway_factory: Callable[[], GitHubContentGateway],
        renderer,
        thoughts: Optional[List[ThoughtPost]] = None,
    ):
        self.gateway_factory = gateway_factory
        self.renderer = renderer
        self.thoughts = THOUGHTS if thoughts is None else thoughts

    async def fetch(
        self, query: ContentQuery, cancel_token: Optional[CancellationToken] = None
    ) -> Union[ContentList, ContentItem]:
        token = cancel_token or CancellationToken()
        try:
            if query.domain == "thoughts":
                return self.fetch_thoughts(query)
            return await self.fetch_blog(query, token)
        except ContentError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error fetching {query.domain} content: {e}")
            raise ContentError(str(e) or "Failed to fetch content", code="FETCH_ERROR") from e

    def fetch_thoughts(self, query: ContentQuery) -> Union[ContentList, ContentItem]:
        thoughts = [
            thought.model_copy(update={"slug": slugify(thought.title)})
            for thought in self.thoughts
        ]

        if query.slug:
            match = next((t for t in thoughts if t.slug == query.slug), None)
            if match is None:
                raise NotFoundError(f"Thought '{query.slug}' not found")
            return ContentItem(item=match)

        matching = [t for t in thoughts if search_matches(query.search, t.title, t.excerpt)]
        items, total, has_more = paginate(matching, query.page, query.pageSize)
        return ContentList(items=items, total=total, hasMore=has_more)

    async def fetch_blog(
        self, query: ContentQuery, token: CancellationToken
    ) -> Union[ContentList, ContentItem]:
        # raises ConfigurationError before any request goes out
        gateway = self.gateway_factory()

        if query.slug:
            return ContentItem(item=await self.get_blog_post(gateway, query.slug, token))

        if not (query.search or query.tag):
            page = await gateway.list(query.page, query.pageSize)
            token.raise_if_cancelled()
            posts = await self._load_summaries(gateway, page.items)
            token.raise_if_cancelled()
            return ContentList(items=posts, total=page.total, hasMore=page.hasMore)

        # filters need the whole directory before a page can be cut
        stubs = await gateway.list_stubs()
        token.raise_if_cancelled()
        posts = await self._load_summaries(gateway, stubs)
        token.raise_if_cancelled()

        matching = [
            post
            for post in posts
            if search_matches(query.search, post.title, post.summary)
            and (not query.tag or query.tag in post.tags)
        ]
        items, total, has_more = paginate(matching, query.page, query.pageSize)
        return ContentList(items=items, total=total, hasMore=has_more)

    async def get_blog_post(
        self, gateway: GitHubContentGateway, slug: str, token: CancellationToken
    ) -> BlogPost:
        document = await gateway.fetch_one(slug)
        token.raise_if_cancelled()
        try:
            return build_blog_post(
                document.stub.slug,
                document.content,
                html_url=document.stub.htmlUrl,
                renderer=self.renderer,
            )
        except ParseError as e:
            logger.warning(f"Post {slug} has unusable front matter: {e}")
            raise NotFoundError(f"Post '{slug}' not found") from e

    async def _load_summaries(
        self, gateway: GitHubContentGateway, stubs: List[PostStub]
    ) -> List[BlogPost]:
        return list(
            await asyncio.gather(*(self._load_summary(gateway, stub) for stub in stubs))
        )

    async def _load_summary(self, gateway: GitHubContentGateway, stub: PostStub) -> BlogPost:
        try:
            raw = await gateway.download(stub)
            return build_blog_post(stub.slug, raw, html_url=stub.htmlUrl)
        except Exception as e:
            logger.warning(f"Failed to load post {stub.slug}, using placeholder: {e}")
            return placeholder_post(stub)


def build_blog_post(slug: str, raw: str, *, html_url: Optional[str] = None, renderer=None) -> BlogPost:
    """
    Parse a raw markdown document into a BlogPost.

    With a renderer the result also carries the body, its HTML and a
    table of contents; without one only the listing fields are filled.
    Raises ParseError when title, date or summary is missing.
    """
    metadata, body = parse_frontmatter(raw)
    missing = missing_required_fields(metadata)
    if missing:
        raise ParseError(f"Post {slug} is missing front matter: {', '.join(missing)}")

    post_data = {
        "slug": slug,
        "title": str(metadata["title"]),
        "date": str(metadata["date"]),
        "summary": str(metadata["summary"]),
        "tags": _normalize_tags(metadata.get("tags")),
        "readingTime": _reading_time(metadata.get("readingTime"), body),
        "htmlUrl": html_url or None,
    }
    if renderer is not None:
        post_data["content"] = body
        post_data["html"] = renderer.render(body)
        post_data["toc"] = extract_toc(body)
    return BlogPost(**post_data)


def placeholder_post(stub: PostStub) -> BlogPost:
    return BlogPost(
        slug=stub.slug,
        title=stub.slug,
        date=datetime.date.today().isoformat(),
        summary="",
        tags=[],
        readingTime=DEFAULT_READING_TIME,
        htmlUrl=stub.htmlUrl or None,
    )


def _normalize_tags(value) -> List[str]:
    if not value:
        return []
    if isinstance(value, list):
        return [str(tag) for tag in value]
    return [str(value)]


def _reading_time(value, body: str) -> int:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return max(1, round_half_up(value))
    return estimate_reading_time(body)
