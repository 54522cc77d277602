import logging
from collections import deque, namedtuple

from geoclustering.datatypes import GeoCluster, WHOLE_WORLD, GeoRect


DEFAULT_MAX_POINTS = 6
DEFAULT_BUDGET = 4
DEFAULT_MIN_SPAN = 1

# 0 | 1
# -----
# 3 | 2
TOP_LEFT, TOP_RIGHT, BOTTOM_RIGHT, BOTTOM_LEFT = range(4)

Leaf = namedtuple('Leaf', ('points',))
Branch = namedtuple('Branch', ('children',))


class OutOfBoundsError(ValueError):
    def __init__(self, bounds, point):
        super().__init__(F'Bounding box {bounds} does not contain point ({point.lng}, {point.lat})')
        self.bounds = bounds
        self.point = point


def _div(total, count):
    # truncate toward zero
    q = abs(total) // count
    return q if total >= 0 else -q


class Node:
    '''
    One cell of the quadtree. A node is either a leaf holding points or a
    branch holding exactly four children; `sum_lng`, `sum_lat` and `count`
    always describe the whole subtree.
    '''
    def __init__(self, bounds, max_points=DEFAULT_MAX_POINTS, points=None, min_span=DEFAULT_MIN_SPAN):
        self.bounds = bounds
        self.max_points = max_points
        self.min_span = min_span

        self.content = Leaf([])
        self.sum_lng = 0
        self.sum_lat = 0
        self.count = 0

        if points is not None:
            self._populate(points)


    @property
    def points(self):
        if isinstance(self.content, Leaf):
            return self.content.points
        return None


    @property
    def children(self):
        if isinstance(self.content, Branch):
            return self.content.children
        return None


    def is_leaf(self):
        return isinstance(self.content, Leaf)


    def is_empty(self):
        # a branch is never empty here, even if all of its children are
        return self.is_leaf() and len(self.content.points) == 0


    def _populate(self, points):
        '''
        Bulk-load a fresh leaf with `points` and split it as often as needed.
        Points are not bounds-checked.
        '''
        points = list(points) if points is not None else []
        self.content = Leaf(points)

        for p in points:
            self.sum_lng += p.lng
            self.sum_lat += p.lat
        self.count = len(points)

        if self._must_split():
            self._split()


    def insert(self, p):
        if not self.bounds.contains(p):
            raise OutOfBoundsError(self.bounds, p)

        self.sum_lng += p.lng
        self.sum_lat += p.lat
        self.count += 1

        if self.is_leaf():
            self.content.points.append(p)
            if self._must_split():
                self._split()
        else:
            self.content.children[self.quadrant_index(p)].insert(p)


    def insert_all(self, points):
        for p in points:
            self.insert(p)


    def quadrant_index(self, p):
        '''
        Index of the child a point belongs to. Quadrants are closed at the
        left and bottom and open at the right and top, except along the
        node's own outer edges, so every point maps to exactly one child.
        '''
        cx, cy = self.bounds.midpoint()
        right = p.lng >= cx
        top = p.lat >= cy

        if top:
            return TOP_RIGHT if right else TOP_LEFT
        return BOTTOM_RIGHT if right else BOTTOM_LEFT


    def _must_split(self):
        return len(self.content.points) > self.max_points \
                and self.bounds.width() > self.min_span \
                and self.bounds.height() > self.min_span


    def _split(self):
        b = self.bounds
        cx, cy = b.midpoint()

        children = (
                Node(GeoRect(b.bl.lng, cy, cx, b.tr.lat), self.max_points, min_span=self.min_span),
                Node(GeoRect(cx, cy, b.tr.lng, b.tr.lat), self.max_points, min_span=self.min_span),
                Node(GeoRect(cx, b.bl.lat, b.tr.lng, cy), self.max_points, min_span=self.min_span),
                Node(GeoRect(b.bl.lng, b.bl.lat, cx, cy), self.max_points, min_span=self.min_span)
                )

        buckets = [ [] for _ in children ]
        for p in self.content.points:
            buckets[self.quadrant_index(p)].append(p)

        logging.debug('Splitting %s at (%s, %s) into %s', b, cx, cy, [ len(x) for x in buckets ])

        self.content = Branch(children)
        for child, bucket in zip(children, buckets):
            child._populate(bucket)


    def centroid(self):
        if self.count == 0:
            return None
        return _div(self.sum_lng, self.count), _div(self.sum_lat, self.count)


    def cluster(self):
        lng, lat = self.centroid()
        return GeoCluster(lng, lat, self.count)


    def iter_points(self):
        if self.is_leaf():
            yield from self.content.points
        else:
            for child in self.content.children:
                yield from child.iter_points()


    def depth(self):
        if self.is_leaf():
            return 0
        return 1 + max(child.depth() for child in self.content.children)


    def frontier(self, rect, budget=DEFAULT_BUDGET):
        '''
        Breadth-first selection of the nodes a query over `rect` stops at.

        A branch is expanded into its non-empty children overlapping `rect`
        unless that would grow the frontier (finished nodes plus queued ones)
        beyond `budget`; then it is kept as it is. Leaves are always kept.
        '''
        queue = deque([self])
        result = []

        while queue:
            node = queue.popleft()

            if node.is_leaf():
                result.append(node)
                continue

            candidates = [ c for c in node.content.children if c.count > 0 and rect.intersects(c.bounds) ]
            if len(result) + len(queue) + len(candidates) > budget:
                result.append(node)
            else:
                queue.extend(candidates)

        logging.debug('Query %s stopped at %s nodes', rect, len(result))
        return result


    def successors(self, rect):
        '''
        Points and clusters one level below this node: a leaf yields its own
        points, a branch one item per non-empty child overlapping `rect`.
        '''
        if self.is_leaf():
            return list(self.content.points)

        res = []
        for child in self.content.children:
            if child.count == 0 or not rect.intersects(child.bounds):
                continue

            if child.count == 1:
                res.extend(child.iter_points())
            else:
                res.append(child.cluster())
        return res


    def query(self, rect, budget=DEFAULT_BUDGET):
        res = []
        for node in self.frontier(rect, budget):
            res.extend(node.successors(rect))
        return res


    def dump(self, indent=0):
        lines = []
        self._dump_lines(lines, indent)
        return ''.join(lines)


    def _dump_lines(self, lines, indent):
        pad = ' ' * indent
        lines.append(F'{pad}Node {self.bounds} count={self.count}\n')

        if self.is_leaf():
            for p in self.content.points:
                lines.append(F'{pad}  ({p.lng}, {p.lat})\n')
        else:
            for child in self.content.children:
                child._dump_lines(lines, indent + 2)


    def __str__(self):
        return self.dump()


class Quadtree:
    def __init__(self, points=None, bounds=WHOLE_WORLD, max_points=DEFAULT_MAX_POINTS,
            budget=DEFAULT_BUDGET, min_span=DEFAULT_MIN_SPAN):
        if max_points < 1:
            raise ValueError(F'max_points must be positive, got {max_points}')
        if budget < 1:
            raise ValueError(F'budget must be positive, got {budget}')
        if min_span < 1:
            raise ValueError(F'min_span must be positive, got {min_span}')

        self.budget = budget
        self.root = Node(bounds, max_points, points, min_span)


    @property
    def bounds(self):
        return self.root.bounds


    def insert(self, p):
        self.root.insert(p)


    def insert_all(self, points):
        self.root.insert_all(points)


    def query(self, rect):
        return self.root.query(rect, self.budget)


    def frontier(self, rect):
        return self.root.frontier(rect, self.budget)


    def is_empty(self):
        return self.root.is_empty()


    def __len__(self):
        return self.root.count


    def __str__(self):
        return str(self.root)
