# diary configuration
# loads env vars for the storage location, list sizes and cors

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# load .env from project root
load_dotenv(Path(__file__).parent.parent / ".env")


class Settings(BaseSettings):
    # local storage
    DIARY_DATA_DIR: Path = Path(os.getenv("DIARY_DATA_DIR", "~/.diary")).expanduser()
    DIARY_STORAGE_KEY: str = os.getenv("DIARY_STORAGE_KEY", "diary-entries")

    # list sizes
    RECENT_ENTRIES_LIMIT: int = 10
    EXCERPT_LENGTH: int = 200

    # cors
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
