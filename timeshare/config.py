import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env FIRST before anything else
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings:
    BASE_DIR: Path = BASE_DIR
    APP_NAME: str = "TimeShare"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # FastAPI
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))

    # Outgoing messages
    MESSAGE_BASE_URL: str = os.getenv("MESSAGE_BASE_URL", "")
    MESSAGE_CAPTION: str = os.getenv("MESSAGE_CAPTION", "I voted")

    # Preview rendering
    RENDER_INSET: int = int(os.getenv("RENDER_INSET", "20"))
    RENDER_FONT_SIZE: int = int(os.getenv("RENDER_FONT_SIZE", "17"))

    # Logging — empty string disables the file handler
    LOG_FILE: str = os.getenv("LOG_FILE", "app.log")


settings = Settings()

# Debug print on import
if settings.DEBUG:
    print(f"[CONFIG] BASE_URL    = {settings.MESSAGE_BASE_URL or '(query only)'}")
    print(f"[CONFIG] CAPTION     = {settings.MESSAGE_CAPTION}")
    print(f"[CONFIG] LOG_FILE    = {settings.LOG_FILE or '(disabled)'}")
