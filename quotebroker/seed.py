import logging

from sqlalchemy.orm import Session

import quotebroker.models  # noqa: F401
from quotebroker.core.config import get_settings
from quotebroker.core.logging import configure_logging
from quotebroker.db.base import Base
from quotebroker.db.session import SessionLocal, get_engine
from quotebroker.services.auth_service import find_by_email, register

logger = logging.getLogger(__name__)


def seed():
    settings = get_settings()
    configure_logging(settings)

    Base.metadata.create_all(bind=get_engine())

    if not settings.admin_email or not settings.admin_password:
        logger.info("admin seed skipped: ADMIN_EMAIL / ADMIN_PASSWORD not set")
        return

    db: Session = SessionLocal()
    try:
        existing = find_by_email(db, settings.admin_email)
        if existing is not None:
            if not existing.is_admin:
                existing.is_admin = True
                db.commit()
            logger.info("admin profile present", extra={"user_id": str(existing.id)})
            return

        admin = register(
            db,
            email=settings.admin_email,
            password=settings.admin_password,
            is_admin=True,
        )
        logger.info("admin profile created", extra={"user_id": str(admin.id)})
    finally:
        db.close()


if __name__ == "__main__":
    seed()
