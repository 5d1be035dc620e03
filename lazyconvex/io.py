"""
Reading sets from text files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

import numpy as np

from .sets.polytopes import VPolygon

logger = logging.getLogger(__name__)


def read_gen(path: Union[str, Path]) -> List[VPolygon]:
    """
    Reads a sequence of polygons in vertex representation ("gen" format).

    Each non-blank line holds the coordinates `x y` of one vertex, separated
    by whitespace. Polygons are separated by one or more blank lines. A final
    block without a trailing blank line is read as well.

    Example:
        1.01 1.01
        0.99 1.01
        0.99 0.99

        0.90 1.31
        0.87 1.31
        0.87 1.28

    Args:
        path: The file to read.

    Returns:
        The polygons, in file order.

    Raises:
        ValueError: If a line does not hold exactly two numbers.
    """
    polygons: List[VPolygon] = []
    vertices: List[np.ndarray] = []

    with open(path, "r") as f:
        for lineno, line in enumerate(f, start=1):
            fields = line.split()
            if fields:
                if len(fields) != 2:
                    raise ValueError(
                        f"{path}:{lineno}: expected two coordinates, got {len(fields)}."
                    )
                vertices.append(np.array([float(x) for x in fields]))
            elif vertices:
                polygons.append(VPolygon(vertices))
                vertices = []

    if vertices:
        polygons.append(VPolygon(vertices))

    logger.debug("Read %d polygons from %s", len(polygons), path)
    return polygons
