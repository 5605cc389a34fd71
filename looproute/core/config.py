# looproute/core/config.py
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (.env file).

    An instance is passed explicitly into every pipeline component; the
    module-level `settings` is only the default.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    APP_NAME: str = "Loop Route Planner API"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Routing provider (driving directions), max points per request
    PROVIDER_POINT_LIMIT: int = 16
    PROVIDER_API_KEY: str = ""
    ROUTING_ENDPOINT: str = "https://restapi.amap.com/v3/direction/driving"
    ROUTING_STRATEGY: int = 0

    # External tour optimizer
    OPTIMIZER_ENDPOINT: str = "http://localhost:8000/optimize_path"
    OPTIMIZER_TIMEOUT_S: float = 10.0
    OPTIMIZER_TEMPERATURE: float = 1.0
    OPTIMIZER_SAMPLE: bool = False

    # Place search / reverse geocoding
    GEOCODE_ENDPOINT: str = "https://restapi.amap.com/v3/geocode/geo"
    REVERSE_GEOCODE_ENDPOINT: str = "https://restapi.amap.com/v3/geocode/regeo"
    SEARCH_CITY: str = "0571"

    HTTP_TIMEOUT_S: float = 15.0

    # Clear the rendered route when a planning attempt fails
    CLEAR_ROUTE_ON_FAILURE: bool = True

    @field_validator("PROVIDER_POINT_LIMIT")
    @classmethod
    def _point_limit_at_least_two(cls, value: int) -> int:
        if value < 2:
            raise ValueError("PROVIDER_POINT_LIMIT must be >= 2")
        return value


settings = Settings()
