"""Qibla direction: initial great-circle bearing to the Kaaba."""

import math

from models import GeoCoordinate

KAABA = GeoCoordinate(latitude=21.4225, longitude=39.8262)


def qibla_direction(coord: GeoCoordinate) -> float:
    """Degrees clockwise from true north, in [0, 360)."""
    kaaba_lat = math.radians(KAABA.latitude)
    lat_r = math.radians(coord.latitude)
    delta_lon = math.radians(KAABA.longitude - coord.longitude)
    direction = math.degrees(math.atan2(
        math.sin(delta_lon),
        math.cos(lat_r) * math.tan(kaaba_lat) - math.sin(lat_r) * math.cos(delta_lon),
    ))
    return (direction + 360) % 360
