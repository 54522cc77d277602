import json

from .geopoint import GeoPoint as _GeoPoint, points_from_degrees as _points_from_degrees
from .georect import GeoRect as _GeoRect, WHOLE_WORLD as _WHOLE_WORLD
from .geocluster import GeoCluster as _GeoCluster
from .serializable import Serializable


# export namespace
GeoPoint = _GeoPoint
GeoRect = _GeoRect
GeoCluster = _GeoCluster
WHOLE_WORLD = _WHOLE_WORLD
points_from_degrees = _points_from_degrees


def _to_json(o):
    if isinstance(o, Serializable):
        return o.to_dict()
    if hasattr(o, '__dict__'):
        return o.__dict__
    raise TypeError(F'Object of type {type(o).__name__} is not JSON serializable')


def _item_from_json(obj):
    if 'size' in obj:
        return GeoCluster.from_json(obj)
    return GeoPoint.from_json(obj)


class ClusterResult(Serializable):
    def __init__(self, viewport, items, metadata):
        self.viewport = viewport
        self.items = items
        self.metadata = metadata


    @classmethod
    def from_json(cls, obj):
        viewport = GeoRect.from_json(obj['viewport'])
        items = [ _item_from_json(i) for i in obj['items'] ]
        metadata = obj['metadata']

        return cls(viewport, items, metadata)


    def to_json(self, out, **kwargs):
        return json.dump(self, out, default=_to_json, **kwargs)
