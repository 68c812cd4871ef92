"""Tests for lenticular.mesh.lens."""

from __future__ import annotations

import numpy as np
import pytest

from lenticular.core.exceptions import DegenerateLensGeometryError, OperationCancelledError
from lenticular.core.models import LensParameters
from lenticular.mesh import (
    LensMeshBuilder,
    lens_triangle_count,
    lens_vertex_count,
    lenticule_count,
)


def _face_normals(mesh):
    v = mesh.vertices.astype(np.float64)
    t = mesh.triangles.astype(np.int64)
    return np.cross(v[t[:, 1]] - v[t[:, 0]], v[t[:, 2]] - v[t[:, 0]])


class TestLenticuleCount:
    def test_scenario(self):
        assert lenticule_count(100, 0.635) == 157

    def test_exact_multiple_not_lost(self):
        pitch = 25.4 / 60
        assert lenticule_count(60 * pitch, pitch) == 60

    def test_narrower_than_pitch(self):
        assert lenticule_count(0.5, 0.635) == 0

    def test_bad_pitch(self):
        with pytest.raises(DegenerateLensGeometryError):
            lenticule_count(10, 0)


class TestClosedForms:
    def test_formulas(self):
        assert lens_vertex_count(157, 16) == 157 * 34 + 4
        assert lens_triangle_count(157, 16) == 157 * 32 + 2

    @pytest.mark.parametrize("count,segments", [(1, 1), (3, 4), (10, 16), (25, 7)])
    def test_mesh_matches_formulas(self, lens40, count, segments):
        mesh = LensMeshBuilder(segments).build(count * lens40.pitch, 5.0, lens40)
        assert mesh.vertex_count == lens_vertex_count(count, segments)
        assert mesh.triangle_count == lens_triangle_count(count, segments)

    def test_scenario_region(self):
        lens = LensParameters.from_pitch(0.635)
        mesh = LensMeshBuilder().build(100.0, 150.0, lens)
        assert mesh.vertex_count == 5342
        assert mesh.triangle_count == 5026


class TestGeometry:
    @pytest.fixture
    def mesh(self, lens40):
        return LensMeshBuilder(16).build(10 * lens40.pitch, 8.0, lens40)

    def test_bounds(self, mesh, lens40):
        lo, hi = mesh.bounds
        np.testing.assert_allclose(lo, [0.0, 0.0, 0.0], atol=1e-5)
        np.testing.assert_allclose(hi, [10 * lens40.pitch, lens40.height, 8.0], atol=1e-5)

    def test_unit_normals(self, mesh):
        np.testing.assert_allclose(np.linalg.norm(mesh.normals, axis=1), 1.0, atol=1e-6)

    def test_winding_matches_normals(self, mesh):
        stored = mesh.normals.astype(np.float64)[mesh.triangles.astype(np.int64)].mean(axis=1)
        dots = np.einsum("ij,ij->i", _face_normals(mesh), stored)
        assert (dots > 0).all()

    def test_base_faces_down(self, mesh):
        base = _face_normals(mesh)[-2:]
        assert (base[:, 1] < 0).all()

    def test_lenticule_tops_at_lens_height(self, mesh, lens40):
        # Peak of lenticule 0 sits at its centre
        top = mesh.vertices[8]
        np.testing.assert_allclose(top, [lens40.pitch / 2, lens40.height, 0.0], atol=1e-5)

    def test_locked_radius_used(self):
        lens = LensParameters.from_lpi(40, radius=0.25)
        mesh = LensMeshBuilder(2).build(lens.pitch, 1.0, lens)
        xs = mesh.vertices[:3, 0]
        np.testing.assert_allclose(xs, [lens.pitch / 2 - 0.25, lens.pitch / 2, lens.pitch / 2 + 0.25], atol=1e-5)


class TestValidation:
    def test_radius_zero(self):
        lens = LensParameters.from_lpi(40, radius=0.0)
        with pytest.raises(DegenerateLensGeometryError, match="radius"):
            LensMeshBuilder().build(10, 10, lens)

    def test_height_not_above_radius(self):
        lens = LensParameters.from_lpi(40, height=0.2)
        with pytest.raises(DegenerateLensGeometryError) as exc_info:
            LensMeshBuilder().build(10, 10, lens)
        assert exc_info.value.parameters["height"] == 0.2

    def test_zero_segments(self, lens40):
        with pytest.raises(DegenerateLensGeometryError, match="segments_around"):
            LensMeshBuilder(0).build(10, 10, lens40)

    @pytest.mark.parametrize("width,depth", [(0, 10), (10, 0), (-1, 10)])
    def test_non_positive_region(self, lens40, width, depth):
        with pytest.raises(DegenerateLensGeometryError):
            LensMeshBuilder().build(width, depth, lens40)

    def test_region_narrower_than_pitch(self, lens40):
        with pytest.raises(DegenerateLensGeometryError, match="pitch"):
            LensMeshBuilder().build(0.5, 10, lens40)


class TestProgressAndCancellation:
    def test_progress(self, lens40):
        seen: list[float] = []
        LensMeshBuilder(4).build(200 * lens40.pitch, 5.0, lens40, progress_callback=seen.append)
        assert seen[0] == 0.0
        assert seen[-1] == 1.0
        assert all(b >= a for a, b in zip(seen, seen[1:]))

    def test_cancel(self, lens40):
        with pytest.raises(OperationCancelledError):
            LensMeshBuilder().build(100, 10, lens40, cancel_check=lambda: True)
