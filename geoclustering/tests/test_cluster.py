import json

import brotli
import pytest

from geoclustering import cluster
from geoclustering.datatypes import ClusterResult, GeoCluster


ROWS = [ dict(name=F'p{i}', lng=(i % 20) * 9 - 90, lat=(i // 20) * 8 - 40) for i in range(200) ]


def write_csv(path, rows):
    with open(path, 'w', encoding='utf-8') as f:
        f.write('name,lng,lat\n')
        for r in rows:
            f.write(F'{r["name"]},{r["lng"]},{r["lat"]}\n')


def members(items):
    return sum(i.size if isinstance(i, GeoCluster) else 1 for i in items)


def test_csv_to_json(tmp_path):
    src = tmp_path / 'points.csv'
    out = tmp_path / 'result.json'
    write_csv(src, ROWS)

    cluster.main([str(src), str(out)])

    with open(out) as f:
        result = ClusterResult.from_json(json.load(f))

    assert result.metadata['points'] == 200
    assert result.metadata['frontier'] <= 4
    assert members(result.items) == 200


def test_json_to_brotli(tmp_path):
    src = tmp_path / 'points.json'
    out = tmp_path / 'result.json.br'
    with open(src, 'w') as f:
        json.dump(ROWS, f)

    cluster.main([str(src), str(out), '--budget', '16', '--max-points', '3'])

    with open(out, 'rb') as f:
        obj = json.loads(brotli.decompress(f.read()))

    assert obj['metadata']['budget'] == 16
    assert obj['metadata']['max_points'] == 3
    assert members(ClusterResult.from_json(obj).items) == 200


def test_bbox_limits_result(tmp_path):
    src = tmp_path / 'points.csv'
    out = tmp_path / 'result.json'
    write_csv(src, ROWS)

    cluster.main([str(src), str(out), '--bbox', '0', '0', '90', '90'])

    with open(out) as f:
        result = ClusterResult.from_json(json.load(f))

    assert result.viewport.bl.lng == 0 and result.viewport.tr.lat == 90000000
    assert 0 < members(result.items) < 200


def test_points_outside_world_are_skipped(tmp_path):
    src = tmp_path / 'points.csv'
    out = tmp_path / 'result.json'
    write_csv(src, [ dict(name='ok', lng=1, lat=1), dict(name='far', lng=200, lat=1) ])

    cluster.main([str(src), str(out)])

    with open(out) as f:
        obj = json.load(f)
    assert obj['metadata']['points'] == 1
    assert obj['items'] == [ dict(lng=1000000, lat=1000000, data='ok') ]


def test_invalid_coordinates_fail(tmp_path):
    src = tmp_path / 'points.csv'
    out = tmp_path / 'result.json'
    with open(src, 'w') as f:
        f.write('name,lng,lat\na,1,1\nb,nan,2\nc,x,3\n')

    with pytest.raises(SystemExit) as err:
        cluster.main([str(src), str(out)])
    assert err.value.code == 1


def test_invalid_configuration_fails(tmp_path):
    src = tmp_path / 'points.csv'
    out = tmp_path / 'result.json'
    write_csv(src, ROWS)

    with pytest.raises(SystemExit) as err:
        cluster.main([str(src), str(out), '--budget', '0'])
    assert err.value.code == 1


def test_non_finite_bbox_fails(tmp_path):
    src = tmp_path / 'points.csv'
    out = tmp_path / 'result.json'
    write_csv(src, ROWS)

    with pytest.raises(SystemExit) as err:
        cluster.main([str(src), str(out), '--bbox', 'inf', '0', '1', '1'])
    assert err.value.code == 1
