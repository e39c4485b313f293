from typing import Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import URL
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: int = 3306
    DB_USER: str = ""
    DB_PASSWORD: str = ""
    DB_NAME: str = ""
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT: int = 30

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    RUN_MIGRATIONS: bool = True
    STATIC_DIR: str = "public"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @property
    def database_url(self) -> str:
        """Resolve the connection string: explicit URL, then MariaDB parts, then SQLite."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DB_HOST:
            return URL.create(
                "mysql+pymysql",
                username=self.DB_USER or None,
                password=self.DB_PASSWORD or None,
                host=self.DB_HOST,
                port=self.DB_PORT,
                database=self.DB_NAME or None,
                query={"charset": "utf8mb4"},
            ).render_as_string(hide_password=False)
        return "sqlite:///./parts.db"


settings = Settings()


def build_engine(database_url: str, pool_size: int = 10, pool_timeout: int = 30):
    # SQLite gets its own single-file pool; every other backend is capped at pool_size
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False}
        )
    return create_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
        pool_pre_ping=True,
    )


engine = build_engine(settings.database_url, settings.DB_POOL_SIZE, settings.DB_POOL_TIMEOUT)

# Create a session local to the database
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# The base for all declarative SQLAlchemy models
Base = declarative_base()


# Dependency to get DB session (FastAPI style)
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
