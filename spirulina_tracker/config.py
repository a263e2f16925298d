"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Persistence
    data_dir: str = Field(
        default="./data",
        description="Directory holding the ponds/logs/harvests JSON collections"
    )
    
    # Generative-text advisor
    gemini_api_key: str = Field(
        default="",
        description="API key for the generative-text service (empty = not configured)"
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com",
        description="Base URL for the generative-text service"
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash",
        description="Model used to answer advisor questions"
    )
    advisor_temperature: float = Field(
        default=0.7,
        description="Sampling temperature sent with advisor questions"
    )
    advisor_timeout_seconds: float = Field(
        default=30.0,
        description="Client-side timeout for a single advisor call"
    )
    advisor_recent_log_count: int = Field(
        default=3,
        description="Number of most recent logs per pond included in the advisor context"
    )
    
    # Harvest ledger
    harvest_page_size: int = Field(
        default=5,
        description="Harvests shown initially and added per 'load more'"
    )
    
    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    
    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )
    
    # Rate Limiting
    rate_limit_requests: int = Field(
        default=20,
        description="Maximum advisor questions per minute per client"
    )
    rate_limit_enabled: bool = Field(
        default=True,
        description="Whether the advisor rate limit is enforced"
    )
    
    # Application Settings
    app_name: str = Field(
        default="Spirulina Culture Tracker",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )
    
    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
