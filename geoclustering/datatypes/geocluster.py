from .serializable import Serializable


class GeoCluster(Serializable):
    '''
    Stand-in for several points: their centroid and how many there are.
    Has `lng` and `lat` like a GeoPoint, so result lists can mix both.
    '''
    def __init__(self, lng, lat, size):
        self.lng = lng
        self.lat = lat
        self.size = size


    def __eq__(self, other):
        if not isinstance(other, GeoCluster):
            return NotImplemented
        return (self.lng, self.lat, self.size) == (other.lng, other.lat, other.size)


    def __hash__(self):
        return hash((self.lng, self.lat, self.size))
