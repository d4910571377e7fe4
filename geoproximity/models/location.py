"""
Location Models
Pydantic models for points, decoded geohash cells and search boxes
"""

from enum import Enum
from typing import List, Tuple
from pydantic import BaseModel, Field, validator


class Direction(str, Enum):
    """Neighbour directions on the geohash grid"""
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def all(cls) -> list[str]:
        return [d.value for d in cls]


class GeoPoint(BaseModel):
    """A latitude/longitude pair"""
    latitude: float = Field(..., ge=-90, le=90, description="Latitude coordinate")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude coordinate")

    class Config:
        frozen = True


class DecodedLocation(BaseModel):
    """Centre of a geohash cell and the half-widths of the cell"""
    latitude: float = Field(..., description="Latitude of the cell centre")
    longitude: float = Field(..., description="Longitude of the cell centre")
    error_lat: float = Field(..., ge=0, description="Maximum latitude deviation from the centre")
    error_lon: float = Field(..., ge=0, description="Maximum longitude deviation from the centre")

    class Config:
        frozen = True

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)

    def bounds(self) -> Tuple[float, float, float, float]:
        """Return (min_lat, min_lon, max_lat, max_lon) of the cell"""
        return (
            self.latitude - self.error_lat,
            self.longitude - self.error_lon,
            self.latitude + self.error_lat,
            self.longitude + self.error_lon,
        )


class CoordinateRange(BaseModel):
    """Closed numeric range [minimum, maximum]"""
    minimum: float
    maximum: float

    class Config:
        frozen = True

    @validator("maximum")
    def validate_order(cls, v, values):
        if "minimum" in values and v < values["minimum"]:
            raise ValueError("Range maximum must not be below its minimum")
        return v

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


class BoundingBox(BaseModel):
    """
    Latitude range ANDed with one or more longitude ranges.

    Two longitude ranges mean the box wraps across the antimeridian; a record
    matches when it lies in the latitude range and in any longitude range.
    """
    latitude: CoordinateRange
    longitudes: List[CoordinateRange] = Field(..., min_length=1, max_length=2)

    class Config:
        frozen = True

    @property
    def crosses_antimeridian(self) -> bool:
        return len(self.longitudes) > 1

    def contains(self, latitude: float, longitude: float) -> bool:
        if not self.latitude.contains(latitude):
            return False
        return any(r.contains(longitude) for r in self.longitudes)
