from pydantic_settings import BaseSettings
from pathlib import Path

# Get the project root directory (parent of the murajaah package)
PROJECT_ROOT = Path(__file__).parent.parent

class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""
    database_url: str = "sqlite:///./murajaah.db"
    
    # Calendar policy used for streaks and forecast buckets
    study_timezone: str = "UTC"
    
    # Default study profile: "new_user", "casual", "serious" or "intensive"
    study_profile: str = "casual"
    
    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"
    
    class Config:
        env_file = str(PROJECT_ROOT / ".env")
        extra = "ignore"

settings = Settings()
