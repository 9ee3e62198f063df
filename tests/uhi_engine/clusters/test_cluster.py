"""Tests for LatLng, MetricDomain and Cluster records."""

import math

import pytest
from uhi_engine.clusters import Cluster, LatLng, MetricDomain


class TestLatLng:
    """GeoJSON order conversion."""

    def test_to_geojson_is_lng_lat(self):
        assert LatLng(19.076, 72.8777).to_geojson() == [72.8777, 19.076]

    def test_from_geojson_ignores_altitude(self):
        p = LatLng.from_geojson([72.8, 19.0, 14.0])
        assert p == LatLng(19.0, 72.8)


class TestMetricDomain:
    """Weight normalization: clamp to [0, 1], inverse flips."""

    def test_in_domain_value(self):
        uhi = MetricDomain("intensity", "UHI Score", 0.0, 10.0)
        assert uhi.normalize(8.5) == pytest.approx(0.85)

    def test_domain_edges(self):
        uhi = MetricDomain("intensity", "UHI Score", 0.0, 10.0)
        assert uhi.normalize(0.0) == 0.0
        assert uhi.normalize(10.0) == 1.0

    def test_out_of_domain_clamps(self):
        uhi = MetricDomain("intensity", "UHI Score", 0.0, 10.0)
        assert uhi.normalize(-4.0) == 0.0
        assert uhi.normalize(42.0) == 1.0
        assert uhi.normalize(math.inf) == 1.0
        assert uhi.normalize(-math.inf) == 0.0

    def test_nan_maps_to_zero(self):
        uhi = MetricDomain("intensity", "UHI Score", 0.0, 10.0)
        assert uhi.normalize(float("nan")) == 0.0

    def test_inverse_metric(self):
        """Vegetation 80% in 0-100 is weight 0.2, not 0.8."""
        veg = MetricDomain("vegetation", "Vegetation", 0.0, 100.0, inverse=True, unit="%")
        assert veg.normalize(80.0) == pytest.approx(0.2)

    def test_inverse_clamps_before_flip(self):
        veg = MetricDomain("vegetation", "Vegetation", 0.0, 100.0, inverse=True)
        assert veg.normalize(150.0) == 0.0
        assert veg.normalize(-10.0) == 1.0

    @pytest.mark.parametrize("value", [0.0, 1.5, 3.3, 5.0, 7.25, 9.99, 10.0])
    def test_in_domain_weights_stay_in_unit_interval(self, value):
        domain = MetricDomain("health", "Health Risk", 0.0, 10.0)
        assert 0.0 <= domain.normalize(value) <= 1.0

    def test_offset_domain(self):
        temp = MetricDomain("lst", "Surface Temp", 20.0, 50.0)
        assert temp.normalize(35.0) == pytest.approx(0.5)

    def test_empty_domain_rejected(self):
        with pytest.raises(ValueError):
            MetricDomain("x", "X", 5.0, 5.0)

    def test_format_uses_unit(self):
        veg = MetricDomain("vegetation", "Vegetation", 0.0, 100.0, unit="%")
        assert veg.format(22.0) == "22%"


class TestCluster:
    """Cluster immutability."""

    def test_metrics_are_read_only(self):
        c = Cluster("a", "A", LatLng(1.0, 2.0), {"intensity": 5.0})
        with pytest.raises(TypeError):
            c.metrics["intensity"] = 9.0

    def test_source_dict_is_copied(self):
        source = {"intensity": 5.0}
        c = Cluster("a", "A", LatLng(1.0, 2.0), source)
        source["intensity"] = 9.0
        assert c.metric("intensity") == 5.0

    def test_fields_are_frozen(self):
        c = Cluster("a", "A", LatLng(1.0, 2.0), {})
        with pytest.raises(Exception):
            c.name = "B"

    def test_boundary_becomes_tuple(self):
        ring = [LatLng(0, 0), LatLng(0, 1), LatLng(1, 1)]
        c = Cluster("a", "A", LatLng(0.5, 0.5), {}, boundary=ring)
        assert isinstance(c.boundary, tuple)
        assert c.has_boundary

    def test_no_boundary(self):
        c = Cluster("a", "A", LatLng(0.5, 0.5), {})
        assert c.boundary is None
        assert not c.has_boundary
