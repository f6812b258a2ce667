import uuid
from types import SimpleNamespace

from quotebroker.policies.visibility import (
    RequestAction,
    ViewLevel,
    decide_quote_visibility,
)

UPLOADER = str(uuid.uuid4())
VIEWER = str(uuid.uuid4())
OTHER = str(uuid.uuid4())


def _quote(uploader=UPLOADER):
    return SimpleNamespace(id=uuid.uuid4(), user_id=uuid.UUID(uploader))


def _req(quote, requester, status):
    return SimpleNamespace(
        id=uuid.uuid4(),
        quote_id=quote.id,
        requester_user_id=uuid.UUID(requester),
        uploader_user_id=quote.user_id,
        status=status,
    )


def test_stranger_without_requests_sees_restricted_view():
    q = _quote()

    vis = decide_quote_visibility(q, viewer_id=VIEWER, viewer_is_admin=False)

    assert vis.level == ViewLevel.restricted
    assert vis.request_action == RequestAction.request
    assert vis.can_download is False
    assert vis.can_delete is False


def test_pending_request_shows_requested_action():
    q = _quote()

    vis = decide_quote_visibility(
        q,
        viewer_id=VIEWER,
        viewer_is_admin=False,
        my_requests=[_req(q, VIEWER, "pending")],
    )

    assert vis.level == ViewLevel.restricted
    assert vis.request_action == RequestAction.requested


def test_denied_request_keeps_view_restricted():
    q = _quote()

    vis = decide_quote_visibility(
        q,
        viewer_id=VIEWER,
        viewer_is_admin=False,
        my_requests=[_req(q, VIEWER, "denied")],
    )

    assert vis.level == ViewLevel.restricted
    assert vis.request_action == RequestAction.request


def test_granted_request_unlocks_full_view_but_not_delete():
    q = _quote()

    vis = decide_quote_visibility(
        q,
        viewer_id=VIEWER,
        viewer_is_admin=False,
        my_requests=[_req(q, VIEWER, "granted")],
    )

    assert vis.is_full
    assert vis.can_download is True
    assert vis.can_delete is False
    assert vis.is_owner is False


def test_request_for_another_quote_does_not_leak():
    q = _quote()
    other_quote = _quote()

    vis = decide_quote_visibility(
        q,
        viewer_id=VIEWER,
        viewer_is_admin=False,
        my_requests=[_req(other_quote, VIEWER, "granted")],
    )

    assert vis.level == ViewLevel.restricted


def test_uploader_always_sees_full_with_pending_requests():
    q = _quote()
    pending = _req(q, VIEWER, "pending")
    granted = _req(q, OTHER, "granted")
    elsewhere = _req(_quote(), OTHER, "pending")

    vis = decide_quote_visibility(
        q,
        viewer_id=UPLOADER,
        viewer_is_admin=False,
        requests_for_my_quotes=[pending, granted, elsewhere],
    )

    assert vis.is_full
    assert vis.is_owner is True
    assert vis.can_delete is True
    assert vis.pending_requests == [pending]


def test_uploader_precedes_admin():
    q = _quote()

    vis = decide_quote_visibility(q, viewer_id=UPLOADER, viewer_is_admin=True)

    assert vis.is_owner is True


def test_admin_sees_full_and_may_delete():
    q = _quote()

    vis = decide_quote_visibility(q, viewer_id=VIEWER, viewer_is_admin=True)

    assert vis.is_full
    assert vis.is_owner is False
    assert vis.can_delete is True
    assert vis.pending_requests == []
