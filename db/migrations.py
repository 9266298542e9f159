import logging

from sqlalchemy.engine import Engine

from models.mysql_models import Base

logger = logging.getLogger(__name__)


def run_migrations(bind: Engine = None):
    if bind is None:
        from db.config import engine as bind

    Base.metadata.create_all(bind=bind)
    logger.info(f"Migrations applied, tables: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    from middleware.request_logging import setup_logging

    setup_logging()
    run_migrations()
