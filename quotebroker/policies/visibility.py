#quotebroker/policies/visibility.py
"""
Render-time decision of how much of a quote a viewer may see.

Pure: operates only on rows the caller already fetched. No session, no I/O.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional

from quotebroker.models.enums import AccessRequestStatus


class ViewLevel(str, Enum):
    full = "full"
    restricted = "restricted"


class RequestAction(str, Enum):
    request = "request"
    requested = "requested"


@dataclass(frozen=True)
class QuoteVisibility:
    level: ViewLevel
    is_owner: bool = False
    can_download: bool = False
    can_delete: bool = False
    # only populated for restricted views
    request_action: Optional[RequestAction] = None
    # only populated for the uploader: requests awaiting their decision
    pending_requests: List[Any] = field(default_factory=list)

    @property
    def is_full(self) -> bool:
        return self.level == ViewLevel.full


def _same(a, b) -> bool:
    return a is not None and b is not None and str(a) == str(b)


def _find(requests: Iterable[Any], quote_id, status: str) -> Optional[Any]:
    for req in requests or ():
        if _same(req.quote_id, quote_id) and req.status == status:
            return req
    return None


def decide_quote_visibility(
    quote: Any,
    *,
    viewer_id,
    viewer_is_admin: bool,
    my_requests: Iterable[Any] = (),
    requests_for_my_quotes: Iterable[Any] = (),
) -> QuoteVisibility:
    """
    Precedence: uploader, then admin, then a granted request, else restricted.
    """
    if _same(quote.user_id, viewer_id):
        pending = [
            req
            for req in requests_for_my_quotes or ()
            if _same(req.quote_id, quote.id)
            and req.status == AccessRequestStatus.pending.value
        ]
        return QuoteVisibility(
            level=ViewLevel.full,
            is_owner=True,
            can_download=True,
            can_delete=True,
            pending_requests=pending,
        )

    if viewer_is_admin:
        return QuoteVisibility(level=ViewLevel.full, can_download=True, can_delete=True)

    my_requests = list(my_requests or ())

    if _find(my_requests, quote.id, AccessRequestStatus.granted.value) is not None:
        return QuoteVisibility(level=ViewLevel.full, can_download=True)

    already_requested = (
        _find(my_requests, quote.id, AccessRequestStatus.pending.value) is not None
    )
    return QuoteVisibility(
        level=ViewLevel.restricted,
        request_action=(
            RequestAction.requested if already_requested else RequestAction.request
        ),
    )
