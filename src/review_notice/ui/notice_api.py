"""
Notice API endpoints.

The host resolves the viewer and passes it in the X-Viewer-Id header; the
current screen travels as a query parameter.
"""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Header, HTTPException, Query, Request

from ..notices.engine import NoticeEngine
from ..notices.models import Notice, NoticeView
from ..notices.registry import NoticeRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notices", tags=["notices"])


def _registry(request: Request) -> NoticeRegistry:
    return request.app.state.registry


def _engine(request: Request) -> NoticeEngine:
    return request.app.state.engine


def _get_notice(request: Request, slug: str) -> Notice:
    notice = _registry(request).get(slug)
    if notice is None:
        raise HTTPException(status_code=404, detail=f"Notice '{slug}' not registered")
    return notice


@router.get("", response_model=List[str])
async def list_notices(request: Request) -> List[str]:
    """List registered notice slugs."""
    return _registry(request).slugs()


@router.get("/{slug}", response_model=NoticeView)
async def get_notice(
    request: Request,
    slug: str,
    screen: Optional[str] = Query(None, description="Current screen ID"),
    viewer_name: Optional[str] = Query(None, description="Viewer display name"),
    x_viewer_id: str = Header(..., description="Current viewer ID"),
) -> NoticeView:
    """
    Evaluate a notice for the current viewer.

    Note that the first evaluation of a notice by a capable viewer on an
    allowed screen starts its waiting period.

    Args:
        slug: Notice slug
        screen: Current screen ID
        viewer_name: Viewer display name for the default message
        x_viewer_id: Current viewer ID

    Returns:
        Notice view; hidden notices carry only the hidden reason
    """
    notice = _get_notice(request, slug)
    decision = _engine(request).evaluate(notice, x_viewer_id, screen)
    return NoticeView.build(notice, decision, viewer_name)


@router.post("/{slug}/actions/{action}")
async def post_action(
    request: Request,
    slug: str,
    action: str,
    screen: Optional[str] = Query(None, description="Current screen ID"),
    x_viewer_id: str = Header(..., description="Current viewer ID"),
) -> Dict[str, str]:
    """
    Answer a notice with 'later' or 'dismiss'.

    Unknown actions and requests the viewer may not make are accepted and
    ignored.

    Args:
        slug: Notice slug
        action: Requested action
        screen: Current screen ID
        x_viewer_id: Current viewer ID

    Returns:
        Status message
    """
    notice = _get_notice(request, slug)
    logger.info(f"Action '{action}' on notice '{slug}' from viewer {x_viewer_id}")
    _engine(request).dispatch_action(notice, x_viewer_id, action, screen)
    return {"status": "accepted"}
