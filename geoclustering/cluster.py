#!/usr/bin/env python3

import csv
import json
import sys
import argparse
import io
import math
import logging
from datetime import datetime

import brotli

from geoclustering.datatypes import GeoRect, ClusterResult, WHOLE_WORLD, points_from_degrees
from geoclustering.util.quadtree import Quadtree, DEFAULT_MAX_POINTS, DEFAULT_BUDGET, DEFAULT_MIN_SPAN
from geoclustering.util.mercator import Mercator


def load_rows(f):
    logging.info('Loading source points from %s', f.name)

    if f.name.endswith('.json'):
        rows = json.load(f)
    else:
        rows = list(csv.DictReader(f))

    logging.info('  Loaded %s rows.', len(rows))
    return rows


def parse_points(rows):
    '''
    Turn rows with `lng`, `lat` (degrees) and an optional `name` into points.
    Rows without usable coordinates fail the whole load, rows outside the
    world are dropped.
    '''
    logging.info('Parsing coordinates.')
    failed = False

    lngs, lats, names = [], [], []
    for i, row in enumerate(rows):
        name = row.get('name', i)
        try:
            lng = float(row['lng'])
            lat = float(row['lat'])
        except (KeyError, TypeError, ValueError):
            logging.error('  Row %s has no valid coordinates!', name)
            failed = True
            continue

        if math.isnan(lng) or math.isnan(lat) or math.isinf(lng) or math.isinf(lat):
            logging.error('  Row %s has no valid coordinates!', name)
            failed = True
            continue

        lngs.append(lng)
        lats.append(lat)
        names.append(name)

    if failed:
        return None

    points = []
    for p in points_from_degrees(lngs, lats, names):
        if WHOLE_WORLD.contains(p):
            points.append(p)
        else:
            logging.warning('  Skipping %s, (%s, %s) is outside the world.', p.data, p.lng, p.lat)

    logging.info('  Parsed %s points.', len(points))
    return points


def query_rect(bbox, mercator):
    if bbox is None:
        return WHOLE_WORLD

    if not all(math.isfinite(v) for v in bbox):
        raise ValueError(F'Non-finite bounding box {bbox}')

    if mercator:
        return Mercator().viewport_to_rect(*bbox)

    return GeoRect.from_degrees(*bbox).clamp(WHOLE_WORLD)


def create_metadata(tree, frontier):
    logging.info('Creating result metadata.')
    return dict(
        created = datetime.now().strftime('%Y%m%dT%H%M%S'),
        points = len(tree),
        depth = tree.root.depth(),
        max_points = tree.root.max_points,
        budget = tree.budget,
        frontier = len(frontier)
        )


def write_result(result, out):
    bytesio = io.StringIO()
    result.to_json(bytesio)
    json_data = bytesio.getvalue().encode('utf-8')
    sz1 = len(json_data)
    logging.info('  Created JSON (~%.1fKiB)', sz1/1024)

    if out.name.endswith('.br'):
        json_data = brotli.compress(json_data, brotli.MODE_TEXT)
        sz2 = len(json_data)
        logging.info('  Compressed to ~%.1fKiB (%.1fx)', sz2/1024, sz1/sz2)

    logging.info('Writing result to %s', out.name)
    out.write(json_data)


def main(argv=None):
    logging.basicConfig(format='%(asctime)s %(levelname)8s  %(message)s',
            level=logging.INFO,
            datefmt='%H:%M:%S')

    parser = argparse.ArgumentParser(description='Cluster geographic points for a map viewport.')
    parser.add_argument('input', metavar='<points csv|json>', help='Input points, lng/lat in degrees', type=argparse.FileType('r', encoding='UTF-8'))
    parser.add_argument('out', metavar='<output file>', help='Output JSON filename, brotli compressed if it ends in .br', type=argparse.FileType('wb'))
    parser.add_argument('--bbox', metavar=('LNG0', 'LAT0', 'LNG1', 'LAT1'), nargs=4, type=float, help='Query rectangle, defaults to the whole world')
    parser.add_argument('--mercator', action='store_true', help='Interpret --bbox as EPSG:3857 metres')
    parser.add_argument('--max-points', type=int, default=DEFAULT_MAX_POINTS, help='Points per leaf before it splits')
    parser.add_argument('--budget', type=int, default=DEFAULT_BUDGET, help='Frontier node budget of the query')
    parser.add_argument('--min-span', type=int, default=DEFAULT_MIN_SPAN, help='Smallest cell span in microdegrees that may still split')
    parser.add_argument('--dump', action='store_true', help='Log the tree structure')
    parser.add_argument('--plot', metavar='<image file>', help='Plot the tree and the result')

    parsed = parser.parse_args(sys.argv[1:] if argv is None else argv)

    points = parse_points(load_rows(parsed.input))
    if points is None:
        sys.exit(1)

    logging.info('Building quadtree.')
    try:
        tree = Quadtree(points, max_points=parsed.max_points, budget=parsed.budget, min_span=parsed.min_span)
    except ValueError as err:
        logging.error('  %s', err)
        sys.exit(1)
    logging.info('  Tree holds %s points, depth %s.', len(tree), tree.root.depth())

    if parsed.dump:
        logging.info('Tree:\n%s', tree)

    try:
        rect = query_rect(parsed.bbox, parsed.mercator)
    except ValueError as err:
        logging.error('Invalid query rectangle: %s', err)
        sys.exit(1)

    if rect is None:
        logging.error('Query rectangle does not overlap the world.')
        sys.exit(1)

    logging.info('Querying %s', rect)
    frontier = tree.frontier(rect)
    items = tree.query(rect)
    logging.info('  %s items from %s frontier nodes.', len(items), len(frontier))

    result = ClusterResult(viewport=rect, items=items, metadata=create_metadata(tree, frontier))
    write_result(result, parsed.out)
    parsed.out.close()

    if parsed.plot is not None:
        from geoclustering.util.plot_quadtree import plot_quadtree
        logging.info('Plotting to %s', parsed.plot)
        plot_quadtree(tree, result=items, out=parsed.plot)

    logging.info('Done clustering')


if __name__ == '__main__':
    main()
