"""
Integration tests for grid builds, resampling and the preview script.

These tests verify that module graphs, builders, containers and rendering
work together, and that parallel builds match sequential ones exactly.
"""
import threading

import numpy as np
import pytest

from noise_generator import color_maps
from noise_generator.builders import CubeBuilder, CylinderBuilder, PlaneBuilder, SphereBuilder
from noise_generator.containers import NoiseCube, NoiseMap
from noise_generator.errors import BuildCancelledError, CycleError, InvalidParameterError, NoModuleError
from noise_generator.modules import Abs, Add, Cache, Invert, Perlin, RidgedMulti, ScaleBias, Select, Turbulence


def _terrain_graph(seed=0):
    mountains = ScaleBias(RidgedMulti(seed=seed, octave_count=3), scale=0.5, bias=0.25)
    flat = ScaleBias(Perlin(frequency=2.0, octave_count=2, seed=seed + 1), scale=0.125, bias=-0.75)
    continents = Cache(Perlin(frequency=0.5, octave_count=2, seed=seed + 2))
    selector = Select(flat, mountains, continents, lower_bound=0.0, upper_bound=1000.0, edge_falloff=0.125)
    shaped = Add(selector, ScaleBias(continents, scale=0.125))
    return Turbulence(shaped, frequency=4.0, power=0.125, roughness=2, seed=seed + 3)


class TestPlaneBuilds:
    """Test planar map builds."""

    @pytest.mark.integration
    def test_plane_projection_coordinates(self, coordinate_module):
        builder = PlaneBuilder(coordinate_module, 4, 2, config={'bounds': (0.0, 4.0, 0.0, 2.0), 'workers': 1})
        noise_map = builder.build()
        expected = np.array([[0, 1, 2, 3], [10, 11, 12, 13]], dtype=np.float32)
        np.testing.assert_array_equal(noise_map.values, expected)

    @pytest.mark.integration
    def test_fixed_z(self, coordinate_module):
        builder = PlaneBuilder(coordinate_module, 2, 2, config={'bounds': (0.0, 2.0, 0.0, 2.0), 'z': 1.0, 'workers': 1})
        assert builder.build().get_value(0, 0) == 100.0

    @pytest.mark.integration
    @pytest.mark.slow
    def test_parallel_matches_sequential(self):
        root = Perlin(seed=42)
        sequential = PlaneBuilder(root, 48, 24, config={'workers': 1}).build()
        parallel = PlaneBuilder(root, 48, 24, config={'workers': 4}).build()
        assert np.array_equal(sequential.values, parallel.values)

    @pytest.mark.integration
    @pytest.mark.slow
    def test_parallel_matches_sequential_with_shared_cache(self):
        # Racing on the cache memo must never change the values.
        root = _terrain_graph(seed=5)
        sequential = PlaneBuilder(root, 32, 16, config={'workers': 1}).build()
        parallel = PlaneBuilder(root, 32, 16, config={'workers': 4}).build()
        assert np.array_equal(sequential.values, parallel.values)

    @pytest.mark.integration
    def test_seamless_plane_is_finite(self):
        builder = PlaneBuilder(Perlin(seed=1, octave_count=2), 16, 8, config={'seamless': True, 'workers': 2})
        noise_map = builder.build()
        assert np.isfinite(noise_map.values).all()

    @pytest.mark.integration
    def test_build_into_existing_destination(self, coordinate_module):
        dest = NoiseMap(1, 1)
        builder = PlaneBuilder(coordinate_module, 3, 2, config={'workers': 1})
        result = builder.build(dest)
        assert result is dest
        assert (dest.width, dest.height) == (3, 2)

    @pytest.mark.integration
    def test_row_callback_sees_every_row(self, coordinate_module):
        rows = []
        builder = PlaneBuilder(coordinate_module, 4, 6, config={'workers': 3})
        builder.row_callback = rows.append
        builder.build()
        assert sorted(rows) == list(range(6))


class TestCurvedProjections:
    """Test cylinder and sphere builds."""

    @pytest.mark.integration
    def test_cylinder_first_column(self, coordinate_module):
        builder = CylinderBuilder(coordinate_module, 4, 2, config={'workers': 1})
        noise_map = builder.build()
        # Angle -180 degrees: (cos, sin) = (-1, 0); first row height is -1.
        assert noise_map.get_value(0, 0) == pytest.approx(-11.0, abs=1e-4)

    @pytest.mark.integration
    def test_sphere_build(self):
        builder = SphereBuilder(Perlin(seed=3, octave_count=3), 16, 8, config={'workers': 2})
        noise_map = builder.build()
        assert noise_map.values.shape == (8, 16)
        assert np.isfinite(noise_map.values).all()

    @pytest.mark.integration
    def test_sphere_first_row_is_south_pole(self, coordinate_module):
        builder = SphereBuilder(coordinate_module, 4, 2, config={'workers': 1})
        noise_map = builder.build()
        # Latitude -90: the point is (0, -1, 0) for every longitude.
        np.testing.assert_allclose(noise_map.values[0], -10.0, atol=1e-4)

    @pytest.mark.integration
    @pytest.mark.parametrize("bounds", [(-100.0, 90.0, -180.0, 180.0), (-90.0, 90.0, -180.0, 200.0)])
    def test_sphere_bounds_validated(self, bounds):
        with pytest.raises(InvalidParameterError):
            SphereBuilder(Perlin(), 4, 4, config={'bounds': bounds})


class TestCubeBuilds:
    """Test 3D builds and trilinear resampling of the result."""

    @pytest.mark.integration
    def test_cube_projection_coordinates(self, coordinate_module):
        builder = CubeBuilder(coordinate_module, 2, 2, 2,
                              config={'bounds': (0.0, 2.0, 0.0, 2.0, 0.0, 2.0), 'workers': 2})
        cube = builder.build()
        for z in range(2):
            for y in range(2):
                for x in range(2):
                    assert cube[x, y, z] == x + 10 * y + 100 * z

    @pytest.mark.integration
    def test_cube_parallel_matches_sequential_and_resamples(self):
        root = Perlin(seed=8, octave_count=2)
        sequential = CubeBuilder(root, 8, 6, 4, config={'workers': 1}).build()
        parallel = CubeBuilder(root, 8, 6, 4, config={'workers': 3}).build(NoiseCube())
        assert np.array_equal(sequential.values, parallel.values)

        resized = NoiseCube.trilinear_filter(parallel, 16, 12, 8, clamp=True)
        assert resized.shape == (8, 12, 16)
        assert np.isfinite(resized.values).all()


class TestBuildErrors:
    """Test errors raised before the parallel phase."""

    @pytest.mark.integration
    def test_missing_source(self):
        with pytest.raises(NoModuleError):
            PlaneBuilder(None, 4, 4).build()

    @pytest.mark.integration
    def test_unset_slot_in_graph(self):
        with pytest.raises(NoModuleError):
            PlaneBuilder(Abs(), 4, 4).build()

    @pytest.mark.integration
    @pytest.mark.parametrize("size", [(0, 4), (4, 0), (-1, 4)])
    def test_destination_size(self, size):
        with pytest.raises(InvalidParameterError):
            PlaneBuilder(Perlin(), *size).build()

    @pytest.mark.integration
    def test_inverted_bounds(self):
        with pytest.raises(InvalidParameterError):
            PlaneBuilder(Perlin(), 4, 4, config={'bounds': (1.0, -1.0, -1.0, 1.0)})
        builder = CylinderBuilder(Perlin(), 4, 4)
        with pytest.raises(InvalidParameterError):
            builder.set_bounds(0.0, 90.0, 1.0, 1.0)

    @pytest.mark.integration
    def test_invalid_worker_count(self):
        with pytest.raises(InvalidParameterError):
            PlaneBuilder(Perlin(), 4, 4, config={'workers': 0}).build()

    @pytest.mark.integration
    def test_cycle_check(self):
        a = Abs()
        b = Invert(a)
        a.set_source_module(0, b)
        with pytest.raises(CycleError):
            PlaneBuilder(b, 4, 4, config={'check_cycles': True}).build()

    @pytest.mark.integration
    @pytest.mark.parametrize("workers", [1, 2])
    def test_cancelled_build(self, workers):
        cancel_event = threading.Event()
        cancel_event.set()
        builder = PlaneBuilder(Perlin(), 8, 8, config={'workers': workers})
        with pytest.raises(BuildCancelledError):
            builder.build(cancel_event=cancel_event)

    @pytest.mark.integration
    def test_cancel_from_row_callback(self, coordinate_module):
        cancel_event = threading.Event()
        builder = PlaneBuilder(coordinate_module, 4, 8, config={'workers': 1})
        builder.row_callback = lambda row: cancel_event.set() if row == 2 else None
        with pytest.raises(BuildCancelledError):
            builder.build(cancel_event=cancel_event)


class TestRendering:
    """Test gradient rendering of built maps."""

    @pytest.mark.integration
    @pytest.mark.parametrize("c0, c1, alpha, expected", [
        ((100, 100, 100, 100), (0, 0, 0, 0), 0.5, (50, 50, 50, 50)),
        ((100, 100, 100, 100), (0, 0, 0, 0), 0.25, (75, 75, 75, 75)),
        ((100, 100, 100, 100), (200, 200, 200, 200), 0.5, (150, 150, 150, 150)),
        ((100, 100, 100, 100), (100, 100, 100, 100), 0.5, (100, 100, 100, 100)),
    ])
    def test_linear_interp_color(self, c0, c1, alpha, expected):
        assert color_maps.linear_interp_color(color_maps.Color(*c0), color_maps.Color(*c1), alpha) == expected

    @pytest.mark.integration
    def test_gradient(self):
        gradient = color_maps.build_grayscale_gradient()
        assert gradient.get_color(-2.0) == (0, 0, 0, 255)
        assert gradient.get_color(2.0) == (255, 255, 255, 255)
        assert gradient.get_color(0.0) == (127, 127, 127, 255)
        with pytest.raises(InvalidParameterError):
            gradient.add_gradient_point(1.0, (1, 2, 3))

    @pytest.mark.integration
    def test_render_terrain_map(self):
        noise_map = PlaneBuilder(_terrain_graph(), 16, 8, config={'workers': 2}).build()
        lut = color_maps.create_gradient_lut(color_maps.build_terrain_gradient())
        assert lut.shape == (256, 4)
        assert lut.dtype == np.uint8
        colors = color_maps.get_color_array(noise_map, lut)
        assert colors.shape == (8, 16, 4)

        image = color_maps.to_image(noise_map, color_maps.build_terrain_gradient())
        assert image.size == (16, 8)
        assert image.mode == "RGBA"


class TestPreviewScript:
    """Test the command-line preview script end to end."""

    @pytest.mark.integration
    def test_renders_png(self, tmp_path):
        from PIL import Image
        import preview_noise

        output = tmp_path / "preview.png"
        code = preview_noise.main([
            "--size", "16x8", "--workers", "2", "--seed", "3", "--output", str(output),
        ])
        assert code == 0
        with Image.open(output) as image:
            assert image.size == (16, 8)

    @pytest.mark.integration
    def test_json_config_and_resample(self, tmp_path):
        import json
        from PIL import Image
        import preview_noise

        config_path = tmp_path / "preview.json"
        output = tmp_path / "sphere.png"
        config_path.write_text(json.dumps({
            'projection': "sphere",
            'width': 12,
            'height': 6,
            'gradient': "grayscale",
            'workers': 1,
            'output': str(output),
        }))
        code = preview_noise.main(["--config", str(config_path), "--resample", "24x12"])
        assert code == 0
        with Image.open(output) as image:
            assert image.size == (24, 12)

    @pytest.mark.integration
    def test_demo_graph_caches_the_shared_control(self):
        import preview_noise

        root = preview_noise.build_terrain_graph(1)
        shaped = root.get_source_module(0)
        selector = shaped.get_source_module(0)
        lift = shaped.get_source_module(1)
        assert isinstance(selector.control, Cache)
        assert lift.get_source_module(0) is selector.control

    @pytest.mark.integration
    def test_missing_config_fails(self, tmp_path):
        import preview_noise
        assert preview_noise.main(["--config", str(tmp_path / "missing.json")]) == 1

    @pytest.mark.integration
    def test_invalid_bounds_fail(self, tmp_path):
        import preview_noise
        code = preview_noise.main([
            "--size", "4x4", "--bounds", "1", "-1", "-1", "1", "--output", str(tmp_path / "x.png"),
        ])
        assert code == 1
