import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _env_list(name: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]


class Settings(BaseModel):
    environment: str = Field(default_factory=lambda: _env("ENVIRONMENT", "production").lower())

    # MongoDB
    mongodb_uri: str = Field(default_factory=lambda: _env("MONGODB_URI"))
    mongodb_uri_test: str = Field(default_factory=lambda: _env("MONGODB_URI_TEST"))
    database_name: str = Field(default_factory=lambda: _env("DATABASE_NAME", "traveladvisor"))
    database_name_test: str = Field(
        default_factory=lambda: _env("DATABASE_NAME_TEST", "traveladvisor_test")
    )

    # Text-generation providers, tried in this order
    gemini_api_key: str = Field(default_factory=lambda: _env("GEMINI_API_KEY"))
    gemini_model: str = Field(default_factory=lambda: _env("GEMINI_MODEL", "gemini-1.5-flash"))
    groq_api_key: str = Field(default_factory=lambda: _env("GROQ_API_KEY"))
    groq_model: str = Field(default_factory=lambda: _env("GROQ_MODEL", "llama-3.1-8b-instant"))

    # Clerk / admin access
    clerk_secret_key: str = Field(default_factory=lambda: _env("CLERK_SECRET_KEY"))
    clerk_jwks_url: str = Field(default_factory=lambda: _env("CLERK_JWKS_URL"))
    clerk_instance_url: str = Field(default_factory=lambda: _env("CLERK_INSTANCE_URL"))
    admin_user_ids: list[str] = Field(default_factory=lambda: _env_list("ADMIN_USER_IDS"))
    admin_emails: list[str] = Field(default_factory=lambda: _env_list("ADMIN_EMAILS"))

    # HTTP
    allowed_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            *_env_list("ALLOWED_ORIGINS"),
        ]
    )
    geo_user_agent: str = Field(
        default_factory=lambda: _env("GEO_USER_AGENT", "traveladvisor/1.0")
    )

    # Place lookup cache
    places_cache_ttl_seconds: int = Field(
        default_factory=lambda: int(_env("PLACES_CACHE_TTL_SECONDS", "300"))
    )
    places_cache_max_size: int = Field(
        default_factory=lambda: int(_env("PLACES_CACHE_MAX_SIZE", "256"))
    )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def get_settings() -> Settings:
    return Settings()
