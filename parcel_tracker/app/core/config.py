"""
Configuration settings for the Parcel Tracker.

This module handles application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""
    
    # Application
    app_name: str = "Parcel Tracker"
    
    # Database Configuration
    database_url: str = "sqlite:///parcel.db"
    db_echo: bool = False
    
    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
