"""Tests for the drawables GeoJSON exporter."""

import json

from uhi_engine.clusters import default_registry
from uhi_engine.layers import DEFAULT_LAYER_BINDINGS, LayerCompositor, LayerVisibility
from uhi_engine.layers.bindings import layer_names
from uhi_engine.layers.drawables import Drawables
from uhi_engine.layers.exporters.geojson import export_geojson


def _frame(*toggled):
    vis = LayerVisibility.all_active(layer_names(DEFAULT_LAYER_BINDINGS))
    for layer in toggled:
        vis = vis.toggle(layer)
    return LayerCompositor().compose(default_registry(), vis)


class TestExportGeojson:

    def test_empty(self):
        assert export_geojson(Drawables()) == {"type": "FeatureCollection", "features": []}

    def test_feature_counts(self):
        fc = export_geojson(_frame())
        kinds = [f["properties"]["kind"] for f in fc["features"]]
        assert kinds.count("heatmap") == 3 * 7
        assert kinds.count("polygon") == 7
        assert kinds.count("marker") == 7

    def test_draw_order(self):
        kinds = [f["properties"]["kind"] for f in export_geojson(_frame())["features"]]
        first_polygon = kinds.index("polygon")
        first_marker = kinds.index("marker")
        assert all(k == "heatmap" for k in kinds[:first_polygon])
        assert all(k == "polygon" for k in kinds[first_polygon:first_marker])
        assert all(k == "marker" for k in kinds[first_marker:])

    def test_inactive_heatmap_absent(self):
        fc = export_geojson(_frame("health"))
        layers = {f["properties"].get("layer") for f in fc["features"] if f["properties"]["kind"] == "heatmap"}
        assert layers == {"intensity", "vegetation"}

    def test_marker_feature(self):
        fc = export_geojson(_frame())
        marker = next(f for f in fc["features"] if f["id"] == "marker:mumbai")
        assert marker["geometry"] == {"type": "Point", "coordinates": [72.8777, 19.0760]}
        assert marker["properties"]["zone"] == "hot"
        assert marker["properties"]["color"] == "#ef4444"

    def test_polygon_ring_closed(self):
        fc = export_geojson(_frame("boundaries"))
        polygon = next(f for f in fc["features"] if f["id"] == "polygon:pune")
        ring = polygon["geometry"]["coordinates"][0]
        assert ring[0] == ring[-1]
        assert polygon["properties"]["emphasized"] is False

    def test_heatmap_feature_weight(self):
        fc = export_geojson(_frame())
        point = next(f for f in fc["features"] if f["id"] == "vegetation:mumbai")
        assert abs(point["properties"]["weight"] - 0.78) < 1e-9

    def test_json_serializable(self):
        json.dumps(export_geojson(_frame()))
