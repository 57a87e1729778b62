import math

import numpy as np
import pytest

from eis.camera import OrthographicCamera
from eis.rendering.renderer2d import (
    MAX_LINES,
    MAX_QUAD_INDICES,
    MAX_QUADS,
    MAX_TEXTURE_SLOTS,
    QuadVertex,
    Renderer2D,
    Statistics,
)
from eis.rendering.renderer_api import API, RendererAPI
from eis.rendering.texture import Texture2D

SHADER_TEXT = "#type vertex\nvoid main() {}\n#type fragment\nvoid main() {}\n"
RED = (1.0, 0.0, 0.0, 1.0)


@pytest.fixture
def api():
    return RendererAPI()


@pytest.fixture
def renderer(tmp_path, monkeypatch, api):
    shaders = tmp_path / "assets" / "shaders"
    shaders.mkdir(parents=True)
    for name in ("Quad", "Circle", "Line"):
        (shaders / f"{name}.glsl").write_text(SHADER_TEXT)
    monkeypatch.chdir(tmp_path)
    return Renderer2D(api)


def test_statistics_counts_per_primitive():
    stats = Statistics(quad_count=1)
    assert stats.vertex_count() == 4
    assert stats.index_count() == 6
    combined = Statistics(quad_count=2, circle_count=1, line_count=3)
    assert combined.vertex_count() == Statistics(quad_count=3).vertex_count() + 3 * 2


def test_init_sets_up_textures_shaders_and_indices(renderer, api):
    assert api.initialized
    assert renderer.api is API.OPENGL
    assert renderer.white_texture.pixels == b"\xff\xff\xff\xff"
    assert renderer.texture_slots == (renderer.white_texture,)
    assert renderer.quad_shader.uniforms["u_Textures"] == tuple(range(MAX_TEXTURE_SLOTS))
    assert renderer.circle_shader.uniforms["u_Texture"] == 0
    ib = renderer.quad_vertex_array.index_buffer
    assert ib.count == MAX_QUAD_INDICES
    assert ib.indices[:6] == (0, 1, 2, 2, 3, 0)
    assert renderer.circle_vertex_array.index_buffer is ib
    assert renderer.line_width == 1.5


def test_draw_quad_vertices(renderer):
    renderer.draw_quad((1.0, 2.0), (2.0, 4.0), RED)
    verts = renderer.quad_vertices
    assert len(verts) == 4
    center = np.mean([v.position for v in verts], axis=0)
    assert np.allclose(center, (1.0, 2.0, 0.0))
    xs = [v.position[0] for v in verts]
    ys = [v.position[1] for v in verts]
    assert max(xs) - min(xs) == pytest.approx(2.0)
    assert max(ys) - min(ys) == pytest.approx(4.0)
    assert [v.tex_coord for v in verts] == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
    assert all(v.color == RED and v.tex_index == 0.0 and v.tiling_factor == 1.0 for v in verts)
    assert renderer.stats.quad_count == 1


def test_textured_quads_share_slots(renderer):
    first, second = Texture2D(1, 1), Texture2D(1, 1)
    renderer.draw_quad((0, 0), (1, 1), texture=first, tiling=3.0)
    renderer.draw_quad((0, 0), (1, 1), texture=first)
    renderer.draw_quad((0, 0), (1, 1), texture=second)
    indices = [v.tex_index for v in renderer.quad_vertices[::4]]
    assert indices == [1.0, 1.0, 2.0]
    assert renderer.quad_vertices[0].tiling_factor == 3.0
    assert renderer.texture_slots == (renderer.white_texture, first, second)


def test_texture_slot_overflow_starts_new_batch(renderer, api):
    for _ in range(MAX_TEXTURE_SLOTS - 1):
        renderer.draw_quad((0, 0), (1, 1), texture=Texture2D(1, 1))
    assert renderer.stats.draw_calls == 0
    extra = Texture2D(1, 1)
    renderer.draw_quad((0, 0), (1, 1), texture=extra)
    assert renderer.stats.draw_calls == 1
    assert renderer.quad_vertices[-1].tex_index == 1.0
    assert renderer.texture_slots == (renderer.white_texture, extra)
    assert len(api.draw_calls) == 1


def test_quad_overflow_flushes(renderer, api):
    for _ in range(MAX_QUADS + 1):
        renderer.draw_quad((0, 0), (1, 1), RED)
    assert renderer.stats.draw_calls == 1
    assert api.draw_calls[0].count == MAX_QUAD_INDICES
    assert len(renderer.quad_vertices) == 4


def test_rotated_quad_invariants(renderer):
    renderer.draw_quad((0.5, -1.0), (3.0, 1.0), RED)
    renderer.draw_rotated_quad((0.5, -1.0), (3.0, 1.0), 0.0, RED)
    renderer.draw_rotated_quad((0.5, -1.0), (3.0, 1.0), 180.0, RED)
    verts = renderer.quad_vertices
    plain = np.array([v.position for v in verts[0:4]])
    zero = np.array([v.position for v in verts[4:8]])
    half = np.array([v.position for v in verts[8:12]])
    assert np.allclose(plain, zero)
    center = np.array([0.5, -1.0, 0.0])
    assert np.allclose(half - center, -(zero - center))


def test_textured_rotated_quad_2d_uses_depth_one(renderer):
    renderer.draw_rotated_quad((0.0, 0.0), (1.0, 1.0), 30.0, texture=Texture2D(1, 1))
    assert all(v.position[2] == pytest.approx(1.0) for v in renderer.quad_vertices)


def test_draw_circle(renderer):
    renderer.draw_circle((2.0, 3.0, 0.5), (1.0, 1.0), RED, thickness=0.25, fade=0.1)
    verts = renderer.circle_vertices
    assert len(verts) == 4
    assert all(abs(v.local_position[0]) == 1.0 and abs(v.local_position[1]) == 1.0 for v in verts)
    center = np.mean([v.world_position for v in verts], axis=0)
    assert np.allclose(center, (2.0, 3.0, 0.5))
    assert all(v.thickness == 0.25 and v.fade == 0.1 for v in verts)
    assert renderer.stats.circle_count == 1


def test_draw_line_and_polar(renderer):
    renderer.draw_line((0.0, 0.0), (1.0, 2.0), RED)
    assert [v.position for v in renderer.line_vertices] == [(0.0, 0.0, 0.0), (1.0, 2.0, 0.0)]
    renderer.draw_line_polar((1.0, 1.0), 0.0, 2.5, RED)
    start, end = renderer.line_vertices[2:]
    assert start.position == (1.0, 1.0, 1.0)
    assert end.position == pytest.approx((1.0, 1.0 + 2.5, 1.0))
    renderer.draw_line_polar((0.0, 0.0, 0.0), 37.0, 4.0, RED)
    a, b = renderer.line_vertices[4:]
    assert math.dist(a.position, b.position) == pytest.approx(4.0)
    assert renderer.stats.line_count == 3


def test_line_overflow_flushes(renderer, api):
    for _ in range(MAX_LINES + 1):
        renderer.draw_line((0, 0), (1, 1), RED)
    assert renderer.stats.draw_calls == 1
    assert api.draw_calls[0].primitive == "lines"
    assert len(renderer.line_vertices) == 2


def test_end_scene_uploads_and_draws(renderer, api):
    camera = OrthographicCamera(-2.0, 2.0, -1.0, 1.0)
    renderer.begin_scene(camera)
    assert np.allclose(renderer.quad_shader.uniforms["u_VP"], camera.view_projection_matrix)
    assert np.allclose(renderer.line_shader.uniforms["u_VP"], camera.view_projection_matrix)
    renderer.draw_quad((0, 0), (1, 1), RED)
    renderer.draw_quad((1, 1), (1, 1), RED)
    renderer.draw_circle((0, 0), (1, 1), RED)
    renderer.draw_line((0, 0), (1, 1), RED)
    renderer.end_scene()
    assert [c.primitive for c in api.draw_calls] == ["triangles", "triangles", "lines"]
    assert api.draw_calls[0].count == 2 * 6
    assert api.draw_calls[0].vertex_array is renderer.quad_vertex_array
    assert api.line_width == renderer.line_width
    assert renderer.stats.draw_calls == 3
    vb = renderer.quad_vertex_array.vertex_buffers[0]
    size = QuadVertex.FORMAT.size
    assert vb.data[:size] == renderer.quad_vertices[0].pack()
    assert renderer.white_texture.bound_slots == frozenset({0})


def test_flush_with_nothing_drawn(renderer, api):
    renderer.flush()
    assert api.draw_calls == []
    assert renderer.stats.draw_calls == 0


def test_reset_stats_and_shutdown(renderer):
    renderer.draw_quad((0, 0), (1, 1), RED)
    renderer.draw_line((0, 0), (1, 1), RED)
    renderer.reset_stats()
    assert renderer.stats == Statistics()
    renderer.shutdown()
    assert renderer.quad_vertices == ()
    assert renderer.line_vertices == ()


def test_commands_forwarded(renderer, api):
    renderer.on_window_resized(800, 600)
    assert api.viewport == (0, 0, 800, 600)
    renderer.set_clear_color((0.1, 0.2, 0.3, 1.0))
    assert api.clear_color == (0.1, 0.2, 0.3, 1.0)
    renderer.clear()
    assert api.clear_count == 1


def test_invalid_arguments(renderer):
    with pytest.raises(ValueError):
        renderer.draw_quad((0, 0), (1, 1), (1.0, 0.0, 0.0))
    with pytest.raises(ValueError):
        renderer.draw_line((0,), (1, 1), RED)
    assert renderer.stats.quad_count == 0