"""Extraction API router - episode pages, QuickPaste memos and diligence blobs."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import Settings, get_settings
from ..core.exceptions import InputRejectedError, RetrievalError
from ..core.http_client import PageFetcher, get_page_fetcher
from ..extraction import (
    EXTRACT_MODES,
    ErrorKind,
    ExtractionFacade,
    MemoRequest,
    PageRequest,
    status_for,
    validate_locator,
)
from ..utils.logging_config import get_logger

logger = get_logger(__name__, component="API")

router = APIRouter()


# ============================================================================
# Pydantic Models
# ============================================================================

class PastedTextRequest(BaseModel):
    text: str


def _check_episode_request(url: Optional[str], extract: str, settings: Settings) -> None:
    """Raise InputRejectedError for a bad locator or an unknown extraction type."""
    error = validate_locator(url, settings.episode_source_domain)
    if error:
        raise InputRejectedError(error)
    if extract not in EXTRACT_MODES:
        raise InputRejectedError(f"Unknown extraction type: {extract}")


# ============================================================================
# Endpoints
# ============================================================================

@router.get("/extract-episode")
async def extract_episode(
    url: Optional[str] = Query(default=None),
    extract: str = Query(default="date"),
    fetcher: PageFetcher = Depends(get_page_fetcher),
    settings: Settings = Depends(get_settings),
):
    """Extract one field, date plus transcript ("both"), or every field ("all") from an episode page."""
    session_id = uuid.uuid4().hex[:8]
    logger.info(f"[extract-episode-{extract}:{session_id}] started for URL: {url}")

    facade = ExtractionFacade()

    try:
        _check_episode_request(url, extract, settings)
    except InputRejectedError as e:
        logger.info(f"[extract-episode-{extract}:{session_id}] rejected: {e}")
        return JSONResponse(
            {'url': url, 'success': False, 'error': str(e), 'errorKind': ErrorKind.INPUT_REJECTED.value},
            status_code=400
        )

    markup = None
    try:
        markup = await fetcher.fetch_text(url)
    except RetrievalError as e:
        logger.warning(f"[extract-episode-{extract}:{session_id}] retrieval failed: {e}")
        envelope = {'url': url, 'success': False, 'error': str(e), 'errorKind': ErrorKind.RETRIEVAL_FAILURE.value}
        return JSONResponse(envelope, status_code=status_for(envelope))

    envelope = facade.extract(PageRequest.for_mode(url, extract, markup))
    status_code = status_for(envelope)

    if envelope['success']:
        logger.info(f"[extract-episode-{extract}:{session_id}] completed")
    else:
        logger.info(f"[extract-episode-{extract}:{session_id}] failed ({status_code}): {envelope['error']}")

    return JSONResponse(envelope, status_code=status_code)


@router.post("/quick-paste")
async def quick_paste(request: PastedTextRequest):
    """Parse a pasted investment memo into form fields."""
    return ExtractionFacade().extract(MemoRequest(text=request.text))


@router.post("/founder-diligence")
async def founder_diligence(request: PastedTextRequest):
    """Parse a pasted founder diligence page."""
    return ExtractionFacade().extract_diligence(request.text)
