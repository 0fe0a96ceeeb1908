"""Backend configuration using Pydantic Settings"""
from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path
import os


class BackendSettings(BaseSettings):
    """Backend configuration loaded from environment variables"""

    # ==================== Server Configuration ====================
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    api_title: str = "Crime Story Studio API"
    api_version: str = "1.0.0"
    api_description: str = """
    Generates YouTube-ready true crime video content with an LLM.

    Each request chains four completions:
    - 📝 Story script
    - 🏷️ Video title
    - 🎬 Visual scene descriptions
    - 🎙️ Narration script
    """

    # ==================== Client Page ====================
    static_dir: str = str(Path(__file__).parent / "static")
    cors_origins: List[str] = ["*"]

    # ==================== Logging ====================
    log_dir: str = "./logs"
    log_rotation: str = "1 day"
    log_retention: str = "30 days"
    log_format: str = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = BackendSettings()

# Override log_level from environment if set (for uvicorn reload support)
if os.getenv('LOG_LEVEL'):
    settings.log_level = os.getenv('LOG_LEVEL')
