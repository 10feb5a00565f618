"""Create the first admin user (run after migrations)"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import structlog
from sqlalchemy import select

from woodyard.core.security import hash_password
from woodyard.database import SessionLocal
from woodyard.logging_config import configure_logging
from woodyard.models import User
from woodyard.models.user import Role

log = structlog.get_logger("init_db")


def main():
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    username = os.getenv("ADMIN_USERNAME", "admin")
    password = os.getenv("ADMIN_PASSWORD", "admin123")
    db = SessionLocal()
    try:
        existing = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
        if existing:
            log.info("admin_exists", username=username)
            return
        db.add(
            User(
                username=username,
                password_hash=hash_password(password),
                role=Role.ADMIN,
                display_name="Administrator",
            )
        )
        db.commit()
        log.info("admin_created", username=username)
    finally:
        db.close()


if __name__ == "__main__":
    main()
