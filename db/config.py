from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from config import database_config


engine = create_engine(database_config.url, pool_pre_ping=database_config.pool_pre_ping)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_mysql_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
