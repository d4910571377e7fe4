"""
Geohash Functions
Encoding, decoding and neighbour lookup for base32 geohashes
"""

from typing import List, Optional, Tuple, Union

from geoproximity.config import settings
from geoproximity.exceptions import InvalidArgument, InvalidHashCharacter
from geoproximity.models.location import DecodedLocation, Direction
from geoproximity.utils.location import validate_coordinates

BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"
_BASE32_MAP = {c: i for i, c in enumerate(BASE32)}
_BITS = (16, 8, 4, 2, 1)

# Neighbour and border tables, keyed by direction then by the parity of the
# hash length. Even-length hashes end in a character carrying 3 latitude
# bits and 2 longitude bits (4 columns x 8 rows); odd-length hashes are the
# transpose (8 columns x 4 rows), so each direction's odd table is the even
# table of the rotated direction.
_NEIGHBORS = {
    "top": {
        "even": "p0r21436x8zb9dcf5h7kjnmqesgutwvy",
        "odd": "bc01fg45238967deuvhjyznpkmstqrwx",
    },
    "bottom": {
        "even": "14365h7k9dcfesgujnmqp0r2twvyx8zb",
        "odd": "238967debc01fg45kmstqrwxuvhjyznp",
    },
    "right": {
        "even": "bc01fg45238967deuvhjyznpkmstqrwx",
        "odd": "p0r21436x8zb9dcf5h7kjnmqesgutwvy",
    },
    "left": {
        "even": "238967debc01fg45kmstqrwxuvhjyznp",
        "odd": "14365h7k9dcfesgujnmqp0r2twvyx8zb",
    },
}

_BORDERS = {
    "top": {"even": "prxz", "odd": "bcfguvyz"},
    "bottom": {"even": "028b", "odd": "0145hjnp"},
    "right": {"even": "bcfguvyz", "odd": "prxz"},
    "left": {"even": "0145hjnp", "odd": "028b"},
}


def encode(latitude: float, longitude: float, precision: Optional[int] = None) -> str:
    """
    Encode coordinates to a geohash string.

    Args:
        latitude: Latitude in degrees, [-90, 90]
        longitude: Longitude in degrees, [-180, 180]
        precision: Number of characters (defaults to settings.geohash_precision)

    Returns:
        Geohash of exactly `precision` characters

    Raises:
        InvalidCoordinate: If the coordinates are out of range
        InvalidArgument: If precision is not a positive integer
    """
    if precision is None:
        precision = settings.geohash_precision
    if isinstance(precision, bool) or not isinstance(precision, int) or precision < 1:
        raise InvalidArgument(f"Precision must be a positive integer, got {precision!r}")
    validate_coordinates(latitude, longitude)

    lat_interval = [-90.0, 90.0]
    lon_interval = [-180.0, 180.0]
    geohash = []
    bit = 0
    ch = 0
    even = True

    while len(geohash) < precision:
        if even:
            mid = (lon_interval[0] + lon_interval[1]) / 2
            if longitude > mid:
                ch |= _BITS[bit]
                lon_interval[0] = mid
            else:
                lon_interval[1] = mid
        else:
            mid = (lat_interval[0] + lat_interval[1]) / 2
            if latitude > mid:
                ch |= _BITS[bit]
                lat_interval[0] = mid
            else:
                lat_interval[1] = mid

        even = not even
        if bit < 4:
            bit += 1
        else:
            geohash.append(BASE32[ch])
            bit = 0
            ch = 0

    return "".join(geohash)


def decode(geohash: str) -> DecodedLocation:
    """
    Decode a geohash to the centre of its cell.

    An empty geohash decodes to the whole world: (0, 0) +/- (90, 180).

    Raises:
        InvalidHashCharacter: If the hash contains a character outside BASE32
    """
    lat_interval = [-90.0, 90.0]
    lon_interval = [-180.0, 180.0]
    even = True

    for position, c in enumerate(geohash.lower()):
        cd = _BASE32_MAP.get(c)
        if cd is None:
            raise InvalidHashCharacter(geohash, position)
        for mask in _BITS:
            interval = lon_interval if even else lat_interval
            interval[0 if cd & mask else 1] = (interval[0] + interval[1]) / 2
            even = not even

    return DecodedLocation(
        latitude=(lat_interval[0] + lat_interval[1]) / 2,
        longitude=(lon_interval[0] + lon_interval[1]) / 2,
        error_lat=(lat_interval[1] - lat_interval[0]) / 2,
        error_lon=(lon_interval[1] - lon_interval[0]) / 2,
    )


def decode_point(geohash: str) -> Tuple[float, float]:
    """Decode a geohash to a (latitude, longitude) tuple"""
    location = decode(geohash)
    return location.latitude, location.longitude


def error_for_precision(precision: int) -> Tuple[float, float]:
    """
    Half-widths (error_lat, error_lon) of a cell at the given precision.
    """
    if precision < 0:
        raise InvalidArgument(f"Precision must not be negative, got {precision}")
    bits = precision * 5
    lat_bits = bits // 2
    lon_bits = bits - lat_bits
    return 90.0 / (2 ** lat_bits), 180.0 / (2 ** lon_bits)


def adjacent(geohash: str, direction: Union[str, Direction]) -> str:
    """
    Get the geohash of the neighbouring cell in a direction.

    When the last character sits on the edge of its parent cell, the parent
    is moved first and the last character wraps around. Left and right wrap
    across the antimeridian. A cell on the northernmost (or southernmost) row
    has no neighbour above (or below) it.

    Args:
        geohash: Geohash string (case-insensitive)
        direction: "top", "bottom", "left" or "right"

    Returns:
        Neighbouring geohash of the same length

    Raises:
        InvalidArgument: If the hash is empty, the direction unknown, or the
            move would cross a pole
        InvalidHashCharacter: If the hash contains a character outside BASE32
    """
    try:
        direction = Direction(direction).value
    except ValueError:
        raise InvalidArgument(
            f"Direction must be one of: {', '.join(Direction.all())}"
        ) from None
    if not geohash:
        raise InvalidArgument("Cannot find the neighbour of an empty geohash")

    geohash = geohash.lower()
    for position, c in enumerate(geohash):
        if c not in _BASE32_MAP:
            raise InvalidHashCharacter(geohash, position)

    vertical = direction in (Direction.TOP.value, Direction.BOTTOM.value)
    if vertical and _on_pole_row(geohash, direction):
        raise InvalidArgument(f"Geohash '{geohash}' has no neighbour {direction}: it borders the pole")

    return _adjacent(geohash, direction)


def _on_pole_row(geohash: str, direction: str) -> bool:
    # Every character, from the last up to the first, sits on the border
    for length in range(len(geohash), 0, -1):
        parity = "odd" if length % 2 else "even"
        if geohash[length - 1] not in _BORDERS[direction][parity]:
            return False
    return True


def _adjacent(geohash: str, direction: str) -> str:
    last = geohash[-1]
    parity = "odd" if len(geohash) % 2 else "even"
    base = geohash[:-1]
    if base and last in _BORDERS[direction][parity]:
        base = _adjacent(base, direction)
    return base + BASE32[_NEIGHBORS[direction][parity].index(last)]


def neighbors(geohash: str) -> List[str]:
    """
    Get the 3x3 block of cells around a geohash, including itself.

    Rows run south to north and columns west to east, so the geohash itself
    is at index 4. Raises InvalidArgument for cells bordering a pole.
    """
    south = adjacent(geohash, Direction.BOTTOM)
    north = adjacent(geohash, Direction.TOP)

    result = []
    for row in (south, geohash, north):
        result.append(adjacent(row, Direction.LEFT))
        result.append(row)
        result.append(adjacent(row, Direction.RIGHT))

    return result
