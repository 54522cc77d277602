import matplotlib.pyplot as plt
import matplotlib.patches
import numpy as np

from geoclustering.datatypes import GeoCluster
from geoclustering.datatypes.geopoint import to_degrees


def plot_quadtree(tree, result=None, out=None):
    '''
    Draw the cells of `tree` and its points. If a query `result` is given,
    its raw points and clusters are drawn on top, clusters sized by how
    many points they stand for. Saves to `out` if given, shows otherwise.
    '''
    fig = plt.figure(figsize=(10,10))
    ax = fig.gca()

    b = tree.bounds
    ax.set_xlim((to_degrees(b.bl.lng), to_degrees(b.tr.lng)))
    ax.set_ylim((to_degrees(b.bl.lat), to_degrees(b.tr.lat)))

    _plot_node(ax, tree.root)

    if result is not None:
        clusters = [ r for r in result if isinstance(r, GeoCluster) ]
        points = [ r for r in result if not isinstance(r, GeoCluster) ]

        if points:
            xy = np.array([ (p.lng, p.lat) for p in points ], dtype=float) / 1e6
            ax.scatter(xy[:,0], xy[:,1], s=20, c='green', zorder=3)

        if clusters:
            xy = np.array([ (c.lng, c.lat) for c in clusters ], dtype=float) / 1e6
            sizes = np.array([ c.size for c in clusters ], dtype=float)
            ax.scatter(xy[:,0], xy[:,1], s=20 + 10 * sizes, c='red', alpha=0.6, zorder=3)
            for (x, y), size in zip(xy, sizes):
                ax.annotate(str(int(size)), (x, y), ha='center', va='center')

    if out is not None:
        fig.savefig(out)
        plt.close(fig)
    else:
        plt.show()


def _plot_node(ax, node):
    b = node.bounds
    r = matplotlib.patches.Rectangle((to_degrees(b.bl.lng), to_degrees(b.bl.lat)),
            to_degrees(b.width()), to_degrees(b.height()),
            fill=False,
            edgecolor='black',
            linewidth=0.5)

    ax.add_patch(r)
    if node.children is not None:
        for child in node.children:
            _plot_node(ax, child)

    else:
        for p in node.points:
            c = matplotlib.patches.Circle((to_degrees(p.lng), to_degrees(p.lat)), radius=0.2, color='blue')
            ax.add_patch(c)
