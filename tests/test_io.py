"""
Tests for reading polygon files.
"""

import pytest

from lazyconvex.io import read_gen
from lazyconvex.sets import VPolygon


def test_read_gen(tmp_path):
    path = tmp_path / "polygons.gen"
    path.write_text(
        "1.01 1.01\n0.99 1.01\n0.99 0.99\n1.01 0.99\n\n"
        "0.90 1.31\n0.87 1.31\n0.87 1.28\n\n"
    )
    polygons = read_gen(path)
    assert len(polygons) == 2
    assert all(isinstance(P, VPolygon) for P in polygons)
    assert len(polygons[0].vertices_list()) == 4
    assert len(polygons[1].vertices_list()) == 3
    assert polygons[0].is_element([1.0, 1.0])


def test_read_gen_without_trailing_blank_line(tmp_path):
    path = tmp_path / "polygons.gen"
    path.write_text("0 0\n1 0\n0 1\n\n\n2 2\n3 2\n2 3")
    polygons = read_gen(str(path))
    assert len(polygons) == 2
    assert polygons[1].is_element([2.2, 2.2])


def test_read_gen_empty_file(tmp_path):
    path = tmp_path / "empty.gen"
    path.write_text("\n\n")
    assert read_gen(path) == []


def test_read_gen_malformed_line(tmp_path):
    path = tmp_path / "bad.gen"
    path.write_text("0 0\n1 0 2\n")
    with pytest.raises(ValueError, match=":2:"):
        read_gen(path)
