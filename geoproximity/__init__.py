"""
geoproximity
Geohash encoding, neighbour lookup and nearest-record queries
"""

__version__ = "1.0.0"
