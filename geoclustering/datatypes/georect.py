from .geopoint import GeoPoint, to_microdegrees, MIN_LNG, MAX_LNG, MIN_LAT, MAX_LAT
from .serializable import Serializable


class GeoRect(Serializable):
    '''
    Closed, axis-aligned rectangle between a bottom-left and a top-right
    corner, both in microdegrees.
    '''
    def __init__(self, lng0, lat0, lng1, lat1):
        if lng0 > lng1 or lat0 > lat1:
            raise ValueError(F'Inverted rectangle ({lng0}, {lat0}) - ({lng1}, {lat1})')

        self.bl = GeoPoint(lng0, lat0)
        self.tr = GeoPoint(lng1, lat1)


    @classmethod
    def from_points(cls, bl, tr):
        return cls(bl.lng, bl.lat, tr.lng, tr.lat)


    @classmethod
    def from_degrees(cls, lng0, lat0, lng1, lat1):
        return cls(to_microdegrees(lng0), to_microdegrees(lat0),
                to_microdegrees(lng1), to_microdegrees(lat1))


    @classmethod
    def from_json(cls, obj):
        return cls(obj['bl']['lng'], obj['bl']['lat'], obj['tr']['lng'], obj['tr']['lat'])


    def to_dict(self):
        return dict(
                bl=dict(lng=self.bl.lng, lat=self.bl.lat),
                tr=dict(lng=self.tr.lng, lat=self.tr.lat)
                )


    def contains(self, p):
        return self.bl.lng <= p.lng <= self.tr.lng and self.bl.lat <= p.lat <= self.tr.lat


    def intersects(self, other):
        return self.bl.lng <= other.tr.lng and other.bl.lng <= self.tr.lng \
                and self.bl.lat <= other.tr.lat and other.bl.lat <= self.tr.lat


    def midpoint(self):
        return (self.bl.lng + self.tr.lng) // 2, (self.bl.lat + self.tr.lat) // 2


    def width(self):
        return self.tr.lng - self.bl.lng


    def height(self):
        return self.tr.lat - self.bl.lat


    def clamp(self, other):
        '''
        Intersection with `other`, or None if they do not overlap.
        '''
        if not self.intersects(other):
            return None

        return GeoRect(max(self.bl.lng, other.bl.lng), max(self.bl.lat, other.bl.lat),
                min(self.tr.lng, other.tr.lng), min(self.tr.lat, other.tr.lat))


    def __eq__(self, other):
        if not isinstance(other, GeoRect):
            return NotImplemented
        return (self.bl.lng, self.bl.lat, self.tr.lng, self.tr.lat) \
                == (other.bl.lng, other.bl.lat, other.tr.lng, other.tr.lat)


    def __hash__(self):
        return hash((self.bl.lng, self.bl.lat, self.tr.lng, self.tr.lat))


    def __str__(self):
        return F'[({self.bl.lng}, {self.bl.lat}) - ({self.tr.lng}, {self.tr.lat})]'


WHOLE_WORLD = GeoRect(MIN_LNG, MIN_LAT, MAX_LNG, MAX_LAT)
