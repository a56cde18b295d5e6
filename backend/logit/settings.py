from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    ENV: str = "local"
    DB_HOST: str = "db"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "logit"
    # Full URL wins over the parts above (tests point this at SQLite)
    DATABASE_URL_OVERRIDE: str | None = None

    # Auth
    SECRET_KEY: str = "dev-secret-change-me"       # set a strong one in prod
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Suggestions / insights
    MAX_SUGGESTIONS: int = 12
    MAX_SUGGESTION_TOKENS: int = 6
    INSIGHT_HISTORY_LIMIT: int = 120

    # Editor timings (milliseconds)
    SUGGESTION_DEBOUNCE_MS: int = 140
    AUTOSAVE_DELAY_MS: int = 350
    DRAFT_STORAGE_KEY: str = "workout-draft-v1"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (
            f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

@lru_cache
def get_settings() -> Settings:
    return Settings()
