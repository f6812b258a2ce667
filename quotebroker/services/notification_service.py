"""
Transactional email for the access-request workflow.

Bodies are Jinja2 templates under quotebroker/templates/email, rendered with
autoescaping. Delivery goes through the Resend REST API. Every notification is best-effort:
the helpers at the bottom of this module log failures and never raise, so a
committed state change is never undone or reported as failed because an email
could not be sent. Nothing is retried.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

import httpx
from fastapi import Depends
from jinja2 import Environment, FileSystemLoader, select_autoescape

from quotebroker.core.config import Settings, get_settings
from quotebroker.core.errors import NotificationError

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT = "Unknown project"
UNKNOWN_QUOTE_TYPE = "Unknown quote type"
UNKNOWN_REQUESTER = "An unknown user"
APP_NAME = "Quote Broker"

TEMPLATE_DIR = Path(__file__).parent.parent / "templates" / "email"


class EmailNotifier:
    def __init__(
        self,
        api_key: str,
        api_url: str,
        sender: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.sender = sender
        self.timeout = timeout
        self.transport = transport

    def send(self, *, to: str, subject: str, html: str) -> None:
        """
        POST one message. Raises NotificationError on transport failure or
        any non-2xx answer.
        """
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    self.api_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={
                        "from": self.sender,
                        "to": [to],
                        "subject": subject,
                        "html": html,
                    },
                )
        except httpx.HTTPError as e:
            raise NotificationError(f"email transport failed: {e}") from e

        if response.status_code >= 300:
            raise NotificationError(
                f"email provider returned {response.status_code}: {response.text[:200]}"
            )


def get_notifier(settings: Settings = Depends(get_settings)) -> EmailNotifier:
    return EmailNotifier(
        api_key=settings.resend_api_key or "",
        api_url=settings.resend_api_url,
        sender=settings.notification_sender,
        timeout=settings.notification_timeout_seconds,
    )


def project_url(base_url: str, project_id) -> str:
    return f"{base_url.rstrip('/')}/projects/{project_id}"


@lru_cache(maxsize=1)
def _jinja_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )


def render_email(template_name: str, **context) -> str:
    return _jinja_env().get_template(f"{template_name}.html").render(app_name=APP_NAME, **context)


def _deliver(
    notifier: Optional[EmailNotifier],
    *,
    kind: str,
    to: Optional[str],
    subject: str,
    html: str,
) -> bool:
    if notifier is None:
        logger.warning("notification skipped: no notifier configured", extra={"kind": kind})
        return False
    if not to:
        logger.error("notification skipped: recipient email unknown", extra={"kind": kind})
        return False
    try:
        notifier.send(to=to, subject=subject, html=html)
    except Exception:
        # the primary operation already committed
        logger.exception("notification failed", extra={"kind": kind, "to": to})
        return False

    logger.info("notification sent", extra={"kind": kind, "to": to})
    return True


def notify_access_requested(
    notifier: Optional[EmailNotifier],
    *,
    uploader_email: Optional[str],
    requester_email: Optional[str],
    contractor_type: Optional[str],
    project_title: Optional[str],
    link: str,
) -> bool:
    html = render_email(
        "access_requested",
        requester_email=requester_email or UNKNOWN_REQUESTER,
        contractor_type=contractor_type or UNKNOWN_QUOTE_TYPE,
        project_title=project_title or UNKNOWN_PROJECT,
        link=link,
    )
    return _deliver(
        notifier,
        kind="access_requested",
        to=uploader_email,
        subject=f"Quote access request for {project_title or UNKNOWN_PROJECT}",
        html=html,
    )


def notify_access_granted(
    notifier: Optional[EmailNotifier],
    *,
    requester_email: Optional[str],
    contractor_type: Optional[str],
    project_title: Optional[str],
    link: str,
) -> bool:
    html = render_email(
        "access_granted",
        contractor_type=contractor_type or UNKNOWN_QUOTE_TYPE,
        project_title=project_title or UNKNOWN_PROJECT,
        link=link,
    )
    return _deliver(
        notifier,
        kind="access_granted",
        to=requester_email,
        subject=f"Quote access granted for {project_title or UNKNOWN_PROJECT}",
        html=html,
    )
