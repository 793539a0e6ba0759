import numpy as np

from surface_navigator.mapping.spatial_index import SpatialIndex
from surface_navigator.mapping.surface_cache import SurfaceSnapshot
from surface_navigator.planners.distance_field import (
    extract_path,
    normalize_distances,
    solve_distance_field,
    wavefront,
)

RES = 0.1


def make_surface(ground):
    ground = np.asarray(ground, dtype=float).reshape(-1, 3)
    empty = np.empty((0, 3))
    return SurfaceSnapshot(
        ground_points=ground,
        obstacle_points=empty,
        ground_index=SpatialIndex(ground),
        obstacle_index=SpatialIndex(empty),
        resolution=RES,
    )


def strip(cells):
    return [[(i + 0.5) * RES, 0.05, 0.05] for i in cells]


def plane(n):
    return [[(i + 0.5) * RES, (j + 0.5) * RES, 0.05] for i in range(n) for j in range(n)]


def test_wavefront_counts_hops():
    graph = [[1], [0, 2], [1, 3], [2], []]

    distances = wavefront(graph, seed=0)

    assert distances[:4].tolist() == [0.0, 1.0, 2.0, 3.0]
    assert np.isinf(distances[4])


def test_strip_field_is_hop_count():
    surface = make_surface(strip(range(5)))

    field = solve_distance_field(surface, (0.0, 0.0, 0.0))

    assert field.goal_index == 0
    assert field.raw.tolist() == [0.0, 1.0, 2.0, 3.0, 4.0]
    assert np.allclose(field.normalized, np.arange(5) / 4.01)


def test_plane_field_is_chebyshev_distance():
    n = 8
    surface = make_surface(plane(n))

    field = solve_distance_field(surface, (0.05, 0.05, 0.05))

    cells = np.rint(surface.ground_points[:, :2] / RES - 0.5).astype(int)
    expected = cells.max(axis=1)
    assert np.array_equal(field.raw, expected.astype(float))
    assert np.count_nonzero(field.raw == 0.0) == 1
    assert field.reachable_mask.all()


def test_gap_wider_than_radius_is_unreachable():
    surface = make_surface(strip([0, 1, 2, 5, 6]))

    field = solve_distance_field(surface, (0.05, 0.05, 0.05))

    assert field.raw[:3].tolist() == [0.0, 1.0, 2.0]
    assert np.isinf(field.raw[3:]).all()
    assert field.normalized[3:].tolist() == [1.0, 1.0]
    assert field.normalized[:3].max() < 1.0


def test_resolve_is_idempotent():
    surface = make_surface(plane(6))

    first = solve_distance_field(surface, (0.3, 0.2, 0.05))
    second = solve_distance_field(surface, (0.3, 0.2, 0.05))

    assert np.array_equal(first.raw, second.raw)
    assert np.array_equal(first.normalized, second.normalized)


def test_empty_surface_cannot_be_seeded():
    assert solve_distance_field(make_surface([]), (0.0, 0.0, 0.0)) is None


def test_single_point_field():
    field = solve_distance_field(make_surface(strip([3])), (0.0, 0.0, 0.0))

    assert field.raw.tolist() == [0.0]
    assert field.normalized.tolist() == [0.0]


def test_normalize_without_finite_values():
    assert normalize_distances(np.array([np.inf, np.inf])).tolist() == [1.0, 1.0]


def test_path_descends_to_goal():
    surface = make_surface(plane(6))
    field = solve_distance_field(surface, (0.05, 0.05, 0.05))

    path = extract_path(surface, field, (0.55, 0.35, 0.05))

    assert len(path) == 6
    assert np.allclose(path[0], [0.55, 0.35, 0.05])
    assert np.allclose(path[-1], [0.05, 0.05, 0.05])


def test_no_path_from_unreachable_start():
    surface = make_surface(strip([0, 1, 5]))
    field = solve_distance_field(surface, (0.05, 0.05, 0.05))

    assert extract_path(surface, field, (0.55, 0.05, 0.05)) == []
