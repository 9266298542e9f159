import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()


@dataclass
class ServerConfig:
    host: str = os.getenv("SERVER_HOST", "0.0.0.0")
    port: int = int(os.getenv("SERVER_PORT", "8080"))
    run_migrations_on_startup: bool = os.getenv("RUN_MIGRATIONS_ON_STARTUP", "true").lower() == "true"


@dataclass
class DatabaseConfig:
    url_override: Optional[str] = os.getenv("DATABASE_URL") or None

    host: str = os.getenv("MYSQL_HOST", "127.0.0.1")
    port: int = int(os.getenv("MYSQL_PORT", "3306"))
    user: str = os.getenv("MYSQL_USER", "root")
    password: str = os.getenv("MYSQL_PASSWORD", "")
    name: str = os.getenv("MYSQL_DB", "subscriptions")

    pool_pre_ping: bool = True

    @property
    def url(self) -> str:
        if self.url_override:
            return self.url_override
        return f"mysql+pymysql://{self.user}:{quote_plus(self.password)}@{self.host}:{self.port}/{self.name}"


@dataclass
class LoggingConfig:
    level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    file: Optional[str] = os.getenv("LOG_FILE") or None
    format: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"
    )


server_config = ServerConfig()
database_config = DatabaseConfig()
logging_config = LoggingConfig()
