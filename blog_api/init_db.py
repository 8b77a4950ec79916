"""Create tables and seed the default roles."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

import blog_api.models  # noqa: F401  registers every model on Base.metadata
from blog_api.config import settings
from blog_api.crud import crud_role
from blog_api.database import Base, SessionLocal, engine

logger = logging.getLogger(__name__)


def init_db(db: Optional[Session] = None) -> None:
    """Create missing tables and make sure the default roles exist. Safe to rerun."""
    Base.metadata.create_all(bind=engine if db is None else db.get_bind())

    session = db or SessionLocal()
    try:
        crud_role.ensure_roles(session, settings.default_roles)
    finally:
        if db is None:
            session.close()
    logger.info("Database initialized")


def main():
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    init_db()


if __name__ == "__main__":
    main()
