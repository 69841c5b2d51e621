from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/flavorhub"
    log_level: str = "INFO"
    sql_echo: bool = False

    # Auth
    secret_key: str = "CHANGE_THIS_IN_PRODUCTION"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # Comma separated list of allowed origins
    cors_origins: str = "http://localhost:3000"

    # Observability
    otlp_endpoint: str = "http://jaeger:4318/v1/traces"
    tracing_enabled: bool = True

    model_config = {"env_file": ".env"}

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
