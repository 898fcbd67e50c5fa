from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # Gemini is reached through its OpenAI-compatible endpoint.
    LLM_API_KEY: str = ""
    LLM_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    LLM_MODEL: str = "gemini-2.5-flash-lite"
    LLM_MAX_OUTPUT_TOKENS: int = 1000
    LLM_TIMEOUT_SECONDS: float = 60.0

    # False keeps the start-date-only overlap check.
    COMPETITION_STRICT_OVERLAP: bool = False

    STUDENT_DATA_PATH: str = "student-data.json"
    # Empty disables saving generated schedules.
    SCHEDULE_OUTPUT_PATH: str = ""

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
