import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from app import dependencies as deps
from app.errors import ConfigurationError, FetchError, NotFoundError
from app.schemas.content import (
    ContentDomain,
    ContentItem,
    ContentList,
    ContentQuery,
    TocItem,
)
from app.services.content_service import ContentService
from app.services.pagination import DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)

router = APIRouter()


async def _fetch(service: ContentService, query: ContentQuery, failure_detail: str):
    try:
        return await service.fetch(query)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ConfigurationError as e:
        logger.error(f"Content source misconfigured: {e}")
        raise HTTPException(status_code=503, detail="Content source is not configured")
    except FetchError as e:
        logger.error(f"Upstream error for {query.domain} content: {e}")
        raise HTTPException(status_code=502, detail=e.message)
    except Exception as e:
        logger.error(f"Unexpected error retrieving {query.domain} content: {e}")
        raise HTTPException(status_code=500, detail=failure_detail)


@router.get("/content/{domain}", response_model=ContentList)
async def list_content(
    domain: ContentDomain,
    search: Optional[str] = None,
    tag: Optional[str] = None,
    page: int = 1,
    pageSize: int = DEFAULT_PAGE_SIZE,
    service: ContentService = Depends(deps.get_content_service),
):
    """List posts of one domain, filtered and paginated."""
    query = ContentQuery(
        domain=domain, search=search, tag=tag, page=page, pageSize=pageSize
    )
    return await _fetch(service, query, "Failed to retrieve posts")


@router.get("/content/{domain}/{slug}", response_model=ContentItem)
async def get_content(
    domain: ContentDomain,
    slug: str,
    service: ContentService = Depends(deps.get_content_service),
):
    """Get a single post by slug."""
    query = ContentQuery(domain=domain, slug=slug)
    return await _fetch(service, query, "Failed to retrieve post")


@router.get("/content/blog/{slug}/toc", response_model=List[TocItem])
async def get_blog_toc(
    slug: str,
    service: ContentService = Depends(deps.get_content_service),
):
    result = await _fetch(
        service, ContentQuery(domain="blog", slug=slug), "Failed to retrieve post"
    )
    return result.item.toc or []


@router.get("/styles/highlight.css")
async def get_highlight_css(highlighter=Depends(deps.get_highlighter)):
    return Response(content=highlighter.stylesheet(), media_type="text/css")
