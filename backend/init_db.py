"""Initialize the database with the system account and the report topic."""

from loguru import logger

from core.logging_config import configure_logging
from core.sentry_config import init_sentry
from models.config import settings
from repositories.database import Base, SessionLocal, engine
from services.moderation_report_service import ModerationReportService
from services.user_service import UserService


def init_db(session_factory=SessionLocal, bind=engine) -> None:
    """Create tables and seed the rows the report workflow relies on."""
    Base.metadata.create_all(bind=bind)

    db = session_factory()

    try:
        system_user = UserService.get_system_user(db)
        logger.info(f"[OK] System user '{system_user.name}' (#{system_user.id}) ready")

        topic = ModerationReportService.forum_topic(db)
        logger.info(f"[OK] Report topic '{topic.title}' (#{topic.id}) ready")

        logger.info("[OK] Database initialization complete!")

    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging(settings.ENVIRONMENT)
    init_sentry()
    init_db()
