from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Dairy Boli"
    environment: str = "development"
    allowed_origins: str = "http://localhost:5173,http://localhost:8080"
    log_level: str = "INFO"

    @property
    def parsed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # MongoDB settings
    mongo_db_name: str = "dairy_boli"
    mongo_uri: str = "mongodb://localhost:27017"

    # Legacy localStorage dump, migrated once at startup
    legacy_cache_path: str = "data/legacy_cache.json"

    # Entry settings
    large_amount_threshold: float = 1000
    speech_language: str = "hi-IN"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
