"""Application configuration using pydantic-settings."""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./database.db"

    # Session tokens - secret is required at login/verification time, not at startup
    jwt_secret: str = Field(default="", validation_alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    jwt_expire_days: int = Field(default=7, validation_alias="JWT_EXPIRE_DAYS")

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        validation_alias="CORS_ORIGINS",
    )

    # CoinGecko price feed
    coingecko_base_url: str = Field(
        default="https://api.coingecko.com/api/v3",
        validation_alias="COINGECKO_BASE_URL",
    )
    coingecko_api_key: str = Field(default="", validation_alias="COINGECKO_API_KEY")

    # CryptoPanic news feed
    cryptopanic_base_url: str = Field(
        default="https://cryptopanic.com/api/developer/v2",
        validation_alias="CRYPTOPANIC_BASE_URL",
    )
    cryptopanic_key: str = Field(default="", validation_alias="CRYPTOPANIC_KEY")

    # Hugging Face router (OpenAI-compatible chat completions)
    hf_router_url: str = Field(
        default="https://router.huggingface.co/v1/chat/completions",
        validation_alias="HF_ROUTER_URL",
    )
    hf_token: str = Field(default="", validation_alias="HF_TOKEN")
    hf_model: str = Field(
        default="meta-llama/Meta-Llama-3-8B-Instruct",
        validation_alias="HF_MODEL",
    )

    # Upstream HTTP calls and caches
    upstream_timeout_seconds: float = Field(
        default=5.0, validation_alias="UPSTREAM_TIMEOUT_SECONDS",
    )
    prices_cache_ttl_seconds: float = Field(
        default=120.0, validation_alias="PRICES_CACHE_TTL_SECONDS",
    )
    news_cache_ttl_seconds: float = Field(
        default=300.0, validation_alias="NEWS_CACHE_TTL_SECONDS",
    )

    # Prebuilt single-page application served for non-API paths
    static_dir: str = Field(default="client/build", validation_alias="STATIC_DIR")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def insight_models(self) -> list[str]:
        """Ordered model identifiers for the insight generator, primary model first."""
        models = [
            self.hf_model,
            "mistralai/Mistral-7B-Instruct-v0.2",
            "HuggingFaceH4/zephyr-7b-beta",
            "google/gemma-1.1-2b-it",
        ]
        # Drop duplicates (HF_MODEL may name one of the fallbacks) while keeping order
        return list(dict.fromkeys(m for m in models if m))


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
