from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./coursefinder.db"
    environment: str = "development"
    log_level: str = "INFO"

    default_page_size: int = 20
    max_page_size: int = 100
    fuzzy_threshold: float = 0.8
    fuzzy_search_floor: float = 0.3
    fuzzy_search_max_results: int = 20
    scoring_concurrency: int = 4

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
