import numpy as np
import pytest

from stashmap.transform import MAPS, DisplayRect, MapDefinition, map_definition, project, project_many, to_display


def test_map_table():
    assert [m.name for m in MAPS] == ["Lumiose City", "Lysandre Labs", "The Sewers", "The Sewers B"]
    assert (MAPS[0].image_width, MAPS[0].image_height) == (4096, 4096)
    assert all(m.direction_x in (1, -1) and m.direction_z in (1, -1) for m in MAPS)


def test_sewers_projection():
    sewers = MAPS[2]
    px, py = project(sewers, 10.0, 5.0)
    assert px == pytest.approx(2160 / 2 + 1 * (1364 / (1364 / 6.2)) * (10 + 1))
    assert py == pytest.approx(2160 / 2 + 1 * (1975 / (1975 / 6.2)) * (5 + 146))
    assert (px, py) == pytest.approx((1148.2, 2016.2))


def test_lumiose_origin_is_flipped():
    px, py = project(MAPS[0], 0.0, 0.0)
    assert (px, py) == pytest.approx((2048 - 3.94 * 500, 2048 - 3.94 * 500))
    # moving +x in the world moves left on the image
    assert project(MAPS[0], 10.0, 0.0)[0] < px


def test_projection_is_linear_per_axis():
    for map_def in MAPS:
        x0, z0 = project(map_def, 0.0, 0.0)
        x1, z1 = project(map_def, 7.0, -3.0)
        x2, z2 = project(map_def, 14.0, -6.0)
        assert x2 - x0 == pytest.approx(2 * (x1 - x0))
        assert z2 - z0 == pytest.approx(2 * (z1 - z0))
        # axes are independent
        assert project(map_def, 7.0, 100.0)[0] == pytest.approx(x1)


def test_points_outside_image_are_not_clipped():
    px, _ = project(MAPS[2], 10000.0, 0.0)
    assert px > MAPS[2].image_width


def test_project_many_matches_project():
    xs = [0.0, 10.0, -250.5]
    zs = [5.0, -80.0, 333.25]
    px, py = project_many(MAPS[1], xs, zs)
    assert isinstance(px, np.ndarray)
    for i in range(3):
        assert (px[i], py[i]) == pytest.approx(project(MAPS[1], xs[i], zs[i]))


def test_map_definition_lookup():
    assert map_definition(3) is MAPS[3]
    assert map_definition(4) is None
    assert map_definition(-1) is None


def test_fit_square_map_into_panel():
    rect = DisplayRect.fit((4096, 4096), (20, 20, 680, 630))
    assert rect == DisplayRect(47, 22, 626, 626)


def test_fit_2160_map_uses_single_precision_scale():
    rect = DisplayRect.fit((2160, 2160), (20, 20, 680, 630))
    assert rect == DisplayRect(47, 22, 625, 625)
    assert all(type(v) is int for v in (rect.x, rect.y, rect.width, rect.height))


def test_fit_keeps_aspect_ratio():
    rect = DisplayRect.fit((200, 100), (0, 0, 404, 404))
    assert (rect.width, rect.height) == (400, 200)
    assert (rect.x, rect.y) == (2, 102)


def test_to_display_truncates():
    rect = DisplayRect(47, 22, 626, 626)
    assert to_display(MAPS[0], rect, 2048.0, 2048.0) == (47 + 313, 22 + 313)
    assert to_display(MAPS[0], rect, 0.0, 4095.9) == (47, 22 + 625)


def test_rect_contains_and_clamp():
    rect = DisplayRect(10, 10, 100, 50)
    assert rect.contains(10, 10)
    assert not rect.contains(110, 20)
    assert rect.clamp_inside(0, 1000) == (14, 56)
    assert rect.clamp_inside(50, 30) == (50, 30)


def test_custom_map_definition():
    flat = MapDefinition("Flat", "flat.png", 100, 100, 1, 1, 1, 1, 1, -1, 0, 0)
    assert project(flat, 5.0, 5.0) == (55.0, 45.0)
