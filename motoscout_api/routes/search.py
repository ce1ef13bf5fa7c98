"""
Search route handlers.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from motoscout.core import SearchSession
from motoscout.errors import InvalidFiltersError
from motoscout.export import records_to_frame
from motoscout.query_builder import build_search_urls

from ..dependencies import get_session
from ..models import ListingOut, SearchFiltersIn, SearchResponse, SourceOut

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["search"])


def _filters_or_422(body: SearchFiltersIn):
    try:
        return body.to_filters()
    except InvalidFiltersError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/sources", response_model=List[SourceOut])
async def get_sources():
    """List the websites searched, with their unfiltered search URLs."""
    return [SourceOut(name=t.source.value, search_url=t.url) for t in build_search_urls()]


@router.post("/search", response_model=SearchResponse, response_model_exclude_none=True)
async def search_listings(body: SearchFiltersIn, session: SearchSession = Depends(get_session)):
    """Search all sources. Failures come back as success=false with a message."""
    filters = _filters_or_422(body)
    result = await session.search(filters)
    if not result.success:
        return SearchResponse(success=False, error=result.error)
    return SearchResponse(success=True, data=[ListingOut.from_record(r) for r in result.data or []])


@router.post("/search/csv")
async def search_listings_csv(body: SearchFiltersIn, session: SearchSession = Depends(get_session)):
    """Search all sources and return the listings as CSV."""
    filters = _filters_or_422(body)
    result = await session.search(filters)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)

    csv_content = records_to_frame(result.data or []).to_csv(index=False).encode("utf-8")
    return StreamingResponse(
        iter([csv_content]),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="motoscout_listings.csv"'}
    )
