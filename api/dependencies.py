"""
API dependencies for dependency injection
"""

from typing import Generator, Optional
from fastapi import Header, Request
from sqlalchemy.orm import Session

from app.context import RequestContext
from domain.models import get_db_session


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_request_context(
    request: Request,
    authorization: Optional[str] = Header(None),
    x_admin_id: Optional[str] = Header(None),
) -> RequestContext:
    """Caller context built from request headers; token validation happens upstream."""
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip() or None
    return RequestContext(
        request_id=getattr(request.state, "request_id", None),
        admin_id=x_admin_id,
        admin_token=token,
    )
