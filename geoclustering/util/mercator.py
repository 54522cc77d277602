from pyproj import CRS, Transformer
from pyproj.enums import TransformDirection

from geoclustering.datatypes import GeoRect, WHOLE_WORLD
from geoclustering.datatypes.geopoint import to_degrees, to_microdegrees


class Mercator:
    '''
    Conversion between microdegree coordinates and Web Mercator (EPSG:3857)
    metres, the coordinate system most map renderers report their viewport in.
    '''
    def __init__(self):
        crs = CRS.from_epsg(3857)
        self.proj = Transformer.from_crs(crs.geodetic_crs, crs, always_xy=True)


    def project(self, p):
        return self.proj.transform(to_degrees(p.lng), to_degrees(p.lat), errcheck=True)


    def viewport_to_rect(self, x0, y0, x1, y1):
        '''
        Smallest rectangle, clamped to the world, enclosing a Mercator viewport.

        @param x0, y0   Bottom-left viewport corner in metres.
        @param x1, y1   Top-right viewport corner in metres.
        '''
        lngs, lats = self.proj.transform(
                [x0, x0, x1, x1],
                [y0, y1, y1, y0],
                direction=TransformDirection.INVERSE
                )

        lngs = [ to_microdegrees(x) for x in lngs ]
        lats = [ to_microdegrees(y) for y in lats ]

        rect = GeoRect(min(lngs), min(lats), max(lngs), max(lats))
        return rect.clamp(WHOLE_WORLD)
