from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import Optional
import os
from dotenv import load_dotenv
# Load environment variables from .env file
load_dotenv()

BASE_DIR = Path(__file__).parent.parent.parent

class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "AcceleraQA Document Retrieval"
    APP_VERSION: str = "0.1.0"

    # SQL DB settings (SQLite for local use, PostgreSQL in production)
    DATABASE_URL: str = f"sqlite:///{BASE_DIR}/data/documents.db" # Using absolute path
    DATABASE_ECHO: bool = False

    # Chunking defaults
    CHUNK_SIZE: int = 1000
    CHUNK_OVERLAP: int = 200
    TEXT_PREVIEW_LENGTH: int = 500

    # Embedding API settings (OpenAI-compatible)
    EMBEDDING_API_BASE: str = "https://api.openai.com/v1"
    EMBEDDING_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
    EMBEDDING_MODEL_NAME: str = "text-embedding-3-small"
    EMBEDDING_DIMENSION: int = 1536  # text-embedding-3-small outputs 1536 dimensions
    EMBEDDING_TIMEOUT_SECONDS: float = 20.0
    EMBEDDING_MAX_INPUT_CHARS: int = 8000
    EMBEDDING_MAX_WORKERS: int = 4

    # Search settings
    DEFAULT_SEARCH_LIMIT: int = 10
    MAX_SEARCH_LIMIT: int = 100
    DEFAULT_VECTOR_THRESHOLD: float = 0.7
    DEFAULT_TEXT_THRESHOLD: float = 0.3

    # Upload settings
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    # Demo behaviour: fill empty uploads with generated compliance text instead of rejecting them
    PLACEHOLDER_ON_EMPTY_UPLOAD: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
