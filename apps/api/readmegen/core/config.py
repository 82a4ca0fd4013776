from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "readme-generator-api"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    GITHUB_TOKEN: str | None = None
    GITHUB_API_BASE: str = "https://api.github.com"
    GITHUB_TIMEOUT_SECONDS: float = 30.0

    GEMINI_API_KEY: str | None = None
    GEMINI_CHAT_MODEL: str = "gemini-2.0-flash"
    GEMINI_TEMPERATURE: float = 0.4

    PING_MESSAGE: str = "ping"

settings = Settings()
