"""Configuration management module"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """LLM call settings shared by the generation services"""

    # OpenAI-compatible chat completion API (credential comes from each request)
    llm_api_url: str = "https://api.openai.com/v1"
    llm_model: str = "gpt-4-turbo-preview"
    llm_timeout: Optional[float] = None  # seconds; None disables the timeout

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# 全局配置实例
settings = Settings()
