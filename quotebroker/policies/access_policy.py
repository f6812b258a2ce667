#quotebroker/policies/access_policy.py
from __future__ import annotations

from typing import Optional

from quotebroker.core.errors import InvalidOperation, PermissionDenied
from quotebroker.models.access_request import AccessRequest
from quotebroker.models.quote import Quote
from quotebroker.policies.rbac import Principal


def can_grant(principal: Optional[Principal], access_request: AccessRequest) -> bool:
    """
    Only the quote's uploader (as recorded on the request) or an admin may decide.
    Anonymous callers never may.
    """
    if principal is None:
        return False
    if principal.is_admin:
        return True
    return principal.is_user(access_request.uploader_user_id)


def enforce_can_grant(principal: Optional[Principal], access_request: AccessRequest) -> None:
    if not can_grant(principal, access_request):
        raise PermissionDenied("Permission denied to update this request.")


def can_delete_quote(principal: Principal, quote: Quote) -> bool:
    return principal.is_admin or principal.is_user(quote.user_id)


def enforce_can_delete_quote(principal: Principal, quote: Quote) -> None:
    if not can_delete_quote(principal, quote):
        raise PermissionDenied("Permission denied to delete this quote.")


def enforce_can_upload_quote(principal: Principal, project_created_by) -> None:
    if principal.is_user(project_created_by):
        raise InvalidOperation("You cannot upload a quote to your own project.")
