from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

ContentDomain = Literal["blog", "thoughts"]


class TocItem(BaseModel):
    level: int = Field(ge=1, le=6)
    text: str
    id: str


class ThoughtPost(BaseModel):
    title: str
    excerpt: str
    date: str
    readTime: str
    slug: str = ""


class BlogPost(BaseModel):
    slug: str
    title: str
    date: str
    summary: str = ""
    tags: List[str] = Field(default_factory=list)
    readingTime: int
    content: Optional[str] = None  # markdown body without front matter
    html: Optional[str] = None
    toc: Optional[List[TocItem]] = None
    htmlUrl: Optional[str] = None


class PostStub(BaseModel):
    """A markdown file entry from the remote directory listing."""

    slug: str
    name: str
    path: str
    url: str = ""  # raw download url
    htmlUrl: str = ""
    sha: str = ""
    size: int = 0


class StubPage(BaseModel):
    items: List[PostStub] = Field(default_factory=list)
    total: int = 0
    hasMore: bool = False


class RemoteDocument(BaseModel):
    stub: PostStub
    content: str


class ContentQuery(BaseModel):
    domain: ContentDomain
    slug: Optional[str] = None
    search: Optional[str] = None
    tag: Optional[str] = None
    page: int = 1
    pageSize: int = 5


class ContentList(BaseModel):
    kind: Literal["list"] = "list"
    items: List[Union[BlogPost, ThoughtPost]] = Field(default_factory=list)
    total: int = 0
    hasMore: bool = False


class ContentItem(BaseModel):
    kind: Literal["single"] = "single"
    item: Union[BlogPost, ThoughtPost]


ContentResult = Annotated[Union[ContentList, ContentItem], Field(discriminator="kind")]
