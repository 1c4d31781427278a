"""
Service configuration via Pydantic Settings; every field can be overridden from the
environment or a .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings

from methods import get_method
from models import CalculationMethod, GeoCoordinate


class Settings(BaseSettings):
    """
    Attributes:
        DEFAULT_LATITUDE / DEFAULT_LONGITUDE: location used when the client sends none
        DEFAULT_CITY: display name of the default location
        CALCULATION_METHOD: name registered in methods.METHODS
        ADHAN_ENABLED: forward fired Sehri/Iftar events to the adhan player
        TIMEZONE_OFFSET_MINUTES: offset east of UTC used for HH:MM rendering
    """

    APP_NAME: str = "Ramadan Prayer Times API"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    DEFAULT_LATITUDE: float = 23.8103  # Dhaka
    DEFAULT_LONGITUDE: float = 90.4125
    DEFAULT_CITY: str = "Dhaka"
    CALCULATION_METHOD: str = "MuslimWorldLeague"
    ADHAN_ENABLED: bool = True
    TIMEZONE_OFFSET_MINUTES: int = 360

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    def default_coordinate(self) -> GeoCoordinate:
        return GeoCoordinate(latitude=self.DEFAULT_LATITUDE, longitude=self.DEFAULT_LONGITUDE)

    def calculation_method(self) -> CalculationMethod:
        return get_method(self.CALCULATION_METHOD)


@lru_cache()
def get_settings() -> Settings:
    """Cached settings factory."""
    return Settings()
