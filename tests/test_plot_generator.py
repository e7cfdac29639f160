# tests/test_plot_generator.py

import folium
import pytest
from pathlib import Path
import sys

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from floatchat.analysis.netcdf_analysis import fabricated_insights
from floatchat.data.fixtures import SampleFloatProvider
from floatchat.data.profile_synthesizer import synthesize_profile
from floatchat.visualization.plot_generator import FloatChatPlotGenerator


class TestPlotGenerator:
    """Test cases for profile plots and float maps"""

    def setup_method(self):
        self.generator = FloatChatPlotGenerator()
        self.rows = synthesize_profile('4902345', '2024-01-15', 2000)

    def test_depth_profile_plot(self):
        """Depth axis increases downward"""
        fig = self.generator.create_depth_profile_plot(self.rows, 'temperature')
        assert len(fig.data) == 1
        assert fig.layout.yaxis.autorange == 'reversed'
        assert list(fig.data[0].y)[:3] == [0, 5, 10]
        assert fig.data[0].x[0] == 19.5
        assert fig.data[0].line.color == '#2563eb'

    def test_salinity_plot_color(self):
        fig = self.generator.create_depth_profile_plot(self.rows, 'salinity')
        assert fig.data[0].line.color == '#16a34a'
        assert fig.layout.title.text == 'Salinity vs Depth'

    def test_unknown_metric(self):
        with pytest.raises(ValueError):
            self.generator.create_depth_profile_plot(self.rows, 'oxygen')

    def test_empty_profile(self):
        fig = self.generator.create_depth_profile_plot([], 'temperature')
        assert len(fig.data) == 0
        assert fig.layout.annotations[0].text == "No profile data available"

    def test_dual_profile_plot(self):
        fig = self.generator.create_dual_profile_plot(self.rows, float_id='4902345')
        assert len(fig.data) == 2
        assert fig.layout.yaxis.autorange == 'reversed'
        assert fig.layout.title.text == 'Float 4902345 Depth Profile'

    def test_float_map(self):
        """Map holds a marker and trajectory per float plus a click popup"""
        floats = SampleFloatProvider().list_floats()
        m = self.generator.create_float_map(floats)
        children = list(m._children.values())
        assert sum(isinstance(c, folium.CircleMarker) for c in children) == len(floats)
        assert sum(isinstance(c, folium.PolyLine) for c in children) == len(floats)
        assert any(isinstance(c, folium.LatLngPopup) for c in children)

    def test_float_map_without_trajectories(self):
        floats = SampleFloatProvider().list_floats()
        m = self.generator.create_float_map(floats, show_trajectories=False)
        assert not any(isinstance(c, folium.PolyLine) for c in m._children.values())

    def test_empty_map(self):
        m = self.generator.create_float_map([])
        assert isinstance(m, folium.Map)
        assert not any(isinstance(c, folium.CircleMarker) for c in m._children.values())

    def test_float_popup(self):
        record = SampleFloatProvider().get_float('2902345')
        popup = self.generator._create_float_popup(record)
        assert "<b>Float ID:</b> 2902345" in popup
        assert "<b>Status:</b> Active" in popup

    def test_parameter_summary_plot(self):
        fig = self.generator.create_parameter_summary_plot(fabricated_insights())
        assert [trace.name for trace in fig.data] == ['Min', 'Mean', 'Max']
        assert list(fig.data[2].y) == [28.5, 35.8]

    def test_create_plot_dispatch(self):
        fig = self.generator.create_plot('profile', self.rows, metric='salinity')
        assert fig.data[0].line.color == '#16a34a'
        with pytest.raises(ValueError):
            self.generator.create_plot('histogram', self.rows)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
