from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Compatibility gate: authors need this many ratings before readers see a score
    MIN_RATINGS_FOR_COMPATIBILITY: int = 10

    # Sentiment buckets (subscores are 1-5)
    SENTIMENT_POSITIVE_MIN_SCORE: int = 4
    SENTIMENT_NEGATIVE_MAX_SCORE: int = 2

    model_config = SettingsConfigDict(
        # Load from backend/.env (relative to this file's parent's parent)
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.LOG_LEVEL.upper() not in VALID_LOG_LEVELS:
            raise RuntimeError(
                f"LOG_LEVEL={self.LOG_LEVEL!r} is not valid. Use one of: {', '.join(sorted(VALID_LOG_LEVELS))}"
            )

        if self.MIN_RATINGS_FOR_COMPATIBILITY < 1:
            raise RuntimeError(
                "MIN_RATINGS_FOR_COMPATIBILITY must be at least 1"
            )

        for name in ("SENTIMENT_POSITIVE_MIN_SCORE", "SENTIMENT_NEGATIVE_MAX_SCORE"):
            value = getattr(self, name)
            if not 1 <= value <= 5:
                raise RuntimeError(f"{name} must be between 1 and 5, got {value}")

        # Buckets must not overlap or a single score would count both ways
        if self.SENTIMENT_NEGATIVE_MAX_SCORE >= self.SENTIMENT_POSITIVE_MIN_SCORE:
            raise RuntimeError(
                "SENTIMENT_NEGATIVE_MAX_SCORE must be lower than SENTIMENT_POSITIVE_MIN_SCORE"
            )


settings = Settings()
