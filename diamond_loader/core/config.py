# diamond_loader/core/config.py
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
load_dotenv()

class Settings(BaseSettings):
    INVENTORY_API_URL: str = "https://api.mazalbot.com"
    INVENTORY_API_TOKEN: str = ""
    UPLOAD_TIMEOUT: float = 60.0

    ASSISTANT_API_URL: str = "http://localhost:54321"
    ASSISTANT_API_KEY: str = ""
    ASSISTANT_PATH: str = "/functions/v1/openai-chat"
    ADVISORY_TIMEOUT: float = 30.0
    ADVISORY_MAX_ISSUES: int = 10
    ADVISORY_MAX_ROWS: int = 3

    DEFAULT_DELIMITER: str = "\t"
    LOG_LEVEL: str = "INFO"

settings = Settings()
