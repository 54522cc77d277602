import numpy as np

from .serializable import Serializable


SCALE = 1000000

MIN_LNG = -180 * SCALE
MAX_LNG = 180 * SCALE
MIN_LAT = -90 * SCALE
MAX_LAT = 90 * SCALE


def to_microdegrees(deg):
    return int(round(deg * SCALE))


def to_degrees(microdeg):
    return microdeg / SCALE


class GeoPoint(Serializable):
    '''
    A geographic location in integer microdegrees.

    Anything with integer `lng` and `lat` attributes can be stored in a
    quadtree; this class adds an optional `data` payload which is carried
    through to query results untouched.
    '''
    def __init__(self, lng, lat, data=None):
        self.lng = int(lng)
        self.lat = int(lat)
        self.data = data


    @classmethod
    def from_degrees(cls, lng, lat, data=None):
        return cls(to_microdegrees(lng), to_microdegrees(lat), data)


    def __eq__(self, other):
        if not isinstance(other, GeoPoint):
            return NotImplemented
        return (self.lng, self.lat, self.data) == (other.lng, other.lat, other.data)


    def __hash__(self):
        return hash((self.lng, self.lat))


def points_from_degrees(lngs, lats, data=None):
    '''
    Convert coordinate arrays in degrees into a list of GeoPoints.

    @param lngs     Array-like of longitudes in degrees.
    @param lats     Array-like of latitudes in degrees, same length as `lngs`.
    @param data     Optional sequence of payloads, one per point.
    '''
    lngs = np.rint(np.asarray(lngs, dtype=float) * SCALE).astype(np.int64)
    lats = np.rint(np.asarray(lats, dtype=float) * SCALE).astype(np.int64)

    if lngs.shape != lats.shape:
        raise ValueError(F'Coordinate arrays differ in shape: {lngs.shape} vs {lats.shape}')

    if data is None:
        data = [ None ] * len(lngs)

    return [ GeoPoint(int(x), int(y), d) for x, y, d in zip(lngs, lats, data) ]
