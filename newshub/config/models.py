"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("newshub", description="Database name")
    user: str = Field("newshub", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(
        "NEWSHUB_DB_PASSWORD", description="Environment variable for password"
    )


class ProviderConfig(BaseModel):
    """Credentials and endpoint for one news provider."""

    enabled: bool = Field(True, description="Whether the provider may be used")
    base_url: Optional[str] = Field(None, description="Override for the provider API base URL")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    api_key_env: Optional[str] = Field(None, description="Environment variable for API key")


class ProvidersConfig(BaseModel):
    """Per-provider settings keyed by source key."""

    newsapi: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(api_key_env="NEWSAPI_KEY")
    )
    guardian: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(api_key_env="GUARDIAN_API_KEY")
    )
    nytimes: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(api_key_env="NYT_API_KEY")
    )


class FetchDefaults(BaseModel):
    """Outbound fetch behaviour."""

    timeout: float = Field(30.0, description="Per-request timeout in seconds", gt=0)
    page_size: int = Field(50, description="Articles requested per provider", ge=1, le=100)
    language: str = Field("en", description="Language filter (NewsAPI only)")
    max_concurrent: int = Field(3, description="Providers fetched in parallel", ge=1, le=10)
    user_agent: str = Field("newshub/0.1 (news aggregator)", description="User-Agent header")


class QueryDefaults(BaseModel):
    """Read-path pagination defaults."""

    per_page: int = Field(15, ge=1, le=100)
    max_per_page: int = Field(100, ge=1, le=100)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    file: Optional[str] = Field(None, description="Optional log file path")


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    fetch: FetchDefaults = Field(default_factory=FetchDefaults)
    query: QueryDefaults = Field(default_factory=QueryDefaults)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
