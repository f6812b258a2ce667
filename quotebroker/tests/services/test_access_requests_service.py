import logging
import uuid

import pytest
from sqlalchemy import select

from quotebroker.core.errors import InvalidOperation, NotFound, PermissionDenied
from quotebroker.models.access_request import AccessRequest
from quotebroker.policies.rbac import Principal
from quotebroker.services.access_requests_service import (
    MSG_ALREADY_GRANTED,
    MSG_ALREADY_PENDING,
    MSG_CREATED,
    AccessRequestsService,
)
from quotebroker.tests.conftest import FakeNotifier


def principal(profile) -> Principal:
    return Principal(user_id=str(profile.id), email=profile.email, is_admin=profile.is_admin)


def rows_for(db, quote):
    db.expire_all()
    return db.execute(
        select(AccessRequest).where(AccessRequest.quote_id == quote.id)
    ).scalars().all()


@pytest.fixture
def svc(notifier):
    return AccessRequestsService(notifier, "https://quotes.example.com/")


def test_request_creates_pending_row_and_notifies_uploader(db, svc, notifier, people, quote):
    result = svc.request_access(db, quote_id=str(quote.id), requester=principal(people["requester"]))

    assert result.created is True
    assert result.message == MSG_CREATED

    rows = rows_for(db, quote)
    assert len(rows) == 1
    assert rows[0].status == "pending"
    assert rows[0].requester_user_id == people["requester"].id
    assert rows[0].uploader_user_id == people["uploader"].id

    assert len(notifier.sent) == 1
    mail = notifier.sent[0]
    assert mail["to"] == "uploader@example.com"
    assert "requester@example.com" in mail["html"]
    assert "Elektriker" in mail["html"]
    assert f"https://quotes.example.com/projects/{quote.project_id}" in mail["html"]


def test_second_request_is_informational(db, svc, notifier, people, quote):
    requester = principal(people["requester"])
    svc.request_access(db, quote_id=str(quote.id), requester=requester)

    again = svc.request_access(db, quote_id=str(quote.id), requester=requester)

    assert again.created is False
    assert again.message == MSG_ALREADY_PENDING
    assert len(rows_for(db, quote)) == 1
    assert len(notifier.sent) == 1


def test_self_request_rejected(db, svc, people, quote):
    with pytest.raises(InvalidOperation) as exc:
        svc.request_access(db, quote_id=str(quote.id), requester=principal(people["uploader"]))

    assert exc.value.message == "You cannot request access to your own quote."
    assert rows_for(db, quote) == []


@pytest.mark.parametrize("quote_id", [str(uuid.uuid4()), "not-a-uuid"])
def test_unknown_quote_is_not_found(db, svc, people, quote_id):
    with pytest.raises(NotFound) as exc:
        svc.request_access(db, quote_id=quote_id, requester=principal(people["requester"]))

    assert exc.value.message == "Could not find the specified quote."


def test_lost_insert_race_returns_winner(db, svc, notifier, people, quote, monkeypatch):
    # a concurrent call already inserted the active row
    winner = AccessRequest(
        quote_id=quote.id,
        requester_user_id=people["requester"].id,
        uploader_user_id=quote.user_id,
        status="pending",
    )
    db.add(winner)
    db.commit()

    real_lookup = svc.get_active_request
    calls = {"n": 0}

    def stale_then_real(session, **kw):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_lookup(session, **kw)

    monkeypatch.setattr(svc, "get_active_request", stale_then_real)

    result = svc.request_access(db, quote_id=str(quote.id), requester=principal(people["requester"]))

    assert result.created is False
    assert result.message == MSG_ALREADY_PENDING
    assert len(rows_for(db, quote)) == 1
    assert notifier.sent == []


def test_grant_by_uploader(db, svc, notifier, people, quote):
    created = svc.request_access(db, quote_id=str(quote.id), requester=principal(people["requester"]))
    notifier.sent.clear()

    req = svc.grant(db, request_id=str(created.access_request.id), caller=principal(people["uploader"]))

    assert req.status == "granted"
    assert [m["to"] for m in notifier.sent] == ["requester@example.com"]

    again = svc.request_access(db, quote_id=str(quote.id), requester=principal(people["requester"]))
    assert again.message == MSG_ALREADY_GRANTED


def test_grant_by_admin(db, svc, people, quote):
    created = svc.request_access(db, quote_id=str(quote.id), requester=principal(people["requester"]))

    req = svc.grant(db, request_id=str(created.access_request.id), caller=principal(people["admin"]))

    assert req.status == "granted"


@pytest.mark.parametrize("who", ["outsider", "requester", "owner", None])
def test_grant_refused_for_everyone_else(db, svc, people, quote, who):
    created = svc.request_access(db, quote_id=str(quote.id), requester=principal(people["requester"]))
    caller = principal(people[who]) if who else None

    with pytest.raises(PermissionDenied) as exc:
        svc.grant(db, request_id=str(created.access_request.id), caller=caller)

    assert exc.value.message == "Permission denied to update this request."
    assert rows_for(db, quote)[0].status == "pending"


def test_regrant_does_not_notify_twice(db, svc, notifier, people, quote):
    created = svc.request_access(db, quote_id=str(quote.id), requester=principal(people["requester"]))
    uploader = principal(people["uploader"])
    svc.grant(db, request_id=str(created.access_request.id), caller=uploader)
    sent_before = len(notifier.sent)

    req = svc.grant(db, request_id=str(created.access_request.id), caller=uploader)

    assert req.status == "granted"
    assert len(notifier.sent) == sent_before


def test_grant_unknown_request_is_not_found(db, svc, people):
    with pytest.raises(NotFound) as exc:
        svc.grant(db, request_id=str(uuid.uuid4()), caller=principal(people["admin"]))

    assert exc.value.message == "Could not find the request details."


def test_notification_failure_does_not_undo_request(db, people, quote):
    svc = AccessRequestsService(FakeNotifier(fail=True), "http://localhost:3000")

    result = svc.request_access(db, quote_id=str(quote.id), requester=principal(people["requester"]))

    assert result.created is True
    assert len(rows_for(db, quote)) == 1


def test_request_without_notifier_logs_skip(db, people, quote, caplog):
    caplog.set_level(logging.INFO, logger="quotebroker.services.notification_service")
    svc = AccessRequestsService(None, "http://localhost:3000")

    result = svc.request_access(db, quote_id=str(quote.id), requester=principal(people["requester"]))

    assert result.created is True
    messages = [r.getMessage() for r in caplog.records]
    assert "notification skipped: no notifier configured" in messages
    assert "notification failed" not in messages


def test_incoming_listing_filters_by_status(db, svc, people, quote):
    svc.request_access(db, quote_id=str(quote.id), requester=principal(people["requester"]))
    created = svc.request_access(db, quote_id=str(quote.id), requester=principal(people["outsider"]))
    svc.grant(db, request_id=str(created.access_request.id), caller=principal(people["uploader"]))

    pending = svc.list_for_uploader(db, uploader_id=people["uploader"].id, status="pending")
    everything = svc.list_for_uploader(db, uploader_id=people["uploader"].id)

    assert [r.requester.email for r in pending] == ["requester@example.com"]
    assert len(everything) == 2
    assert svc.list_for_requester(db, requester_id=people["outsider"].id)[0].status == "granted"
