from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StopsSettings(BaseSettings):
    # Empty means "first column" / "detect from header"
    STOPS_ID_COLUMN: str = ""
    STOPS_DELIMITER: str = ""

    # Candidate column names, first match wins (JSON list in env)
    STOPS_LON_COLUMNS: List[str] = ["StopLng", "lon", "stop_lon", "longitude", "lng"]
    STOPS_LAT_COLUMNS: List[str] = ["StopLat", "lat", "stop_lat", "latitude"]
    STOPS_NAME_COLUMNS: List[str] = ["Stopname", "name", "stop_name"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Frontend (map renderer) origin for CORS
    FRONTEND_URL: str = "http://localhost:5173"

    # Label transform for the CSV map-drop mode: reverse, upper, strip, identity
    POINT_LABEL_TRANSFORM: str = "reverse"

    # SlowAPI storage
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Stops table settings (nested)
    stops: StopsSettings = Field(default_factory=StopsSettings)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    # Flat accessors used by TraceWorkspace.from_settings
    @property
    def STOPS_ID_COLUMN(self) -> str:
        return self.stops.STOPS_ID_COLUMN

    @property
    def STOPS_DELIMITER(self) -> str:
        return self.stops.STOPS_DELIMITER

    @property
    def STOPS_LON_COLUMNS(self) -> List[str]:
        return self.stops.STOPS_LON_COLUMNS

    @property
    def STOPS_LAT_COLUMNS(self) -> List[str]:
        return self.stops.STOPS_LAT_COLUMNS

    @property
    def STOPS_NAME_COLUMNS(self) -> List[str]:
        return self.stops.STOPS_NAME_COLUMNS

    def validate_settings(self) -> None:
        """Validate settings that would otherwise fail on first use.

        Raises ValueError listing every problem found.
        """
        from src.trace_bc.point.infrastructure.services.csv_point_parser import LABEL_TRANSFORMS

        errors = []

        if self.POINT_LABEL_TRANSFORM.lower() not in LABEL_TRANSFORMS:
            errors.append(
                f"POINT_LABEL_TRANSFORM must be one of {', '.join(sorted(LABEL_TRANSFORMS))}"
            )

        if self.STOPS_DELIMITER and len(self.STOPS_DELIMITER) != 1:
            errors.append("STOPS_DELIMITER must be a single character")

        if self.LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"LOG_LEVEL '{self.LOG_LEVEL}' is not a logging level")

        if self.is_production and self.DEBUG:
            errors.append("DEBUG must be False in production")

        if errors:
            raise ValueError(
                "Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Create settings instance
settings = Settings()
settings.validate_settings()
