"""
Per-request caller context, passed explicitly to services instead of being read
from ambient session state.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RequestContext:
    request_id: Optional[str] = None
    admin_id: Optional[str] = None
    admin_token: Optional[str] = None

    @property
    def actor(self) -> str:
        return self.admin_id or "anonymous"


SYSTEM_CONTEXT = RequestContext(admin_id="system")
