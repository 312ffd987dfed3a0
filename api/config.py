from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.ext.declarative import declarative_base
from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./rxtrain.db"
    secret_key: str = "change-me-in-production"
    access_token_expire_minutes: int = 30
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2:1b"
    # Upper bound for any single language-model round trip
    llm_timeout_seconds: float = 20.0
    log_level: str = "INFO"
    log_dir: str = "logs"


settings = Settings()


def _connect_args(url: str) -> dict:
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


engine = create_engine(settings.database_url, connect_args=_connect_args(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def create_db():
    # Models must be imported so their tables are registered on Base.metadata
    import api.models.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    print("Database created")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
