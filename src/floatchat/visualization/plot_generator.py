# src/floatchat/visualization/plot_generator.py
import plotly.graph_objects as go
from plotly.subplots import make_subplots
import folium
from typing import List, Dict, Any, Optional, Tuple
import logging

from ..analysis.netcdf_analysis import AnalysisInsights
from ..config import config
from ..data.fixtures import FloatRecord
from ..data.profile_synthesizer import ProfileRow, profile_to_dataframe

logger = logging.getLogger(__name__)


class FloatChatPlotGenerator:
    def __init__(self):
        self.template = config.get('visualization.default_theme', 'plotly_white')
        self.metric_styles = {
            'temperature': {
                'title': 'Temperature vs Depth',
                'label': 'Temperature',
                'unit': '°C',
                'color': config.get('visualization.temperature_color', '#2563eb')
            },
            'salinity': {
                'title': 'Salinity vs Depth',
                'label': 'Salinity',
                'unit': 'PSU',
                'color': config.get('visualization.salinity_color', '#16a34a')
            }
        }
        self.status_colors = {
            'active': 'green',
            'processing': 'orange',
            'inactive': 'gray'
        }

    def _metric_style(self, metric: str) -> Dict[str, str]:
        if metric not in self.metric_styles:
            raise ValueError(f"Unknown metric: {metric}")
        return self.metric_styles[metric]

    def create_depth_profile_plot(self, rows: List[ProfileRow], metric: str = 'temperature',
                                  title: Optional[str] = None) -> go.Figure:
        """Single metric against depth, depth increasing downward"""
        style = self._metric_style(metric)
        if not rows:
            return self._create_empty_plot("No profile data available")

        df = profile_to_dataframe(rows)
        fig = go.Figure(
            go.Scatter(
                x=df[metric],
                y=df['depth'],
                mode='lines',
                name=style['label'],
                line=dict(color=style['color'], width=2),
                hovertemplate=f"%{{x:.2f}} {style['unit']}<br>%{{y}} m<extra></extra>"
            )
        )
        fig.update_layout(
            title=title or style['title'],
            xaxis_title=f"{style['label']} ({style['unit']})",
            yaxis_title="Depth (m)",
            height=config.get('visualization.profile_height', 900),
            template=self.template
        )
        fig.update_yaxes(autorange="reversed", ticksuffix=" m")
        return fig

    def create_dual_profile_plot(self, rows: List[ProfileRow], float_id: Optional[str] = None) -> go.Figure:
        """Temperature and salinity side by side on a shared depth axis"""
        if not rows:
            return self._create_empty_plot("No profile data available")

        df = profile_to_dataframe(rows)
        fig = make_subplots(
            rows=1, cols=2,
            shared_yaxes=True,
            subplot_titles=(self.metric_styles['temperature']['title'],
                            self.metric_styles['salinity']['title'])
        )

        for col, metric in enumerate(('temperature', 'salinity'), start=1):
            style = self.metric_styles[metric]
            fig.add_trace(
                go.Scatter(
                    x=df[metric],
                    y=df['depth'],
                    mode='lines',
                    name=f"{style['label']} ({style['unit']})",
                    line=dict(color=style['color'], width=2)
                ),
                row=1, col=col
            )
            fig.update_xaxes(title_text=f"{style['label']} ({style['unit']})", row=1, col=col)

        fig.update_yaxes(autorange="reversed", title_text="Depth (m)", row=1, col=1)
        fig.update_yaxes(autorange="reversed", row=1, col=2)
        fig.update_layout(
            title=f"Float {float_id} Depth Profile" if float_id else "Depth Profile",
            height=config.get('visualization.profile_height', 900),
            template=self.template
        )
        return fig

    def create_float_map(self, floats: List[FloatRecord],
                         center: Optional[Tuple[float, float]] = None,
                         zoom: Optional[int] = None,
                         show_trajectories: bool = True) -> folium.Map:
        """Markers for every float plus their trajectories"""
        if center is None:
            center = tuple(config.get('map.center', [-27.6057, 78.8352]))
        if zoom is None:
            zoom = config.get('map.zoom', 3)

        if not floats:
            return self._create_empty_map(center)

        m = folium.Map(
            location=list(center),
            zoom_start=zoom,
            tiles=config.get('map.tiles', 'OpenStreetMap'),
            control_scale=True
        )

        for record in floats:
            color = self.status_colors.get(record.status, 'blue')

            if show_trajectories and len(record.trajectory) > 1:
                folium.PolyLine(
                    locations=[list(point) for point in record.trajectory],
                    color=color,
                    weight=2,
                    opacity=0.7,
                    dash_array='5, 5',
                    tooltip=f"Float {record.float_id} trajectory"
                ).add_to(m)

            folium.CircleMarker(
                location=[record.latitude, record.longitude],
                radius=8,
                popup=folium.Popup(self._create_float_popup(record), max_width=300),
                tooltip=f"Float {record.float_id}",
                color=color,
                fill=True,
                fillColor=color
            ).add_to(m)

        folium.LatLngPopup().add_to(m)
        return m

    def _create_float_popup(self, record: FloatRecord) -> str:
        popup_parts = [
            f"<b>Float ID:</b> {record.float_id}",
            f"<b>Name:</b> {record.name}",
            f"<b>Region:</b> {record.region}",
            f"<b>Status:</b> {record.status.title()}",
            f"<b>Location:</b> {record.latitude:.2f}°, {record.longitude:.2f}°",
            f"<b>Last profile:</b> {record.last_profile}",
            f"<b>Temperature:</b> {record.temperature:.1f}°C",
            f"<b>Salinity:</b> {record.salinity:.1f} PSU"
        ]
        return "<br>".join(popup_parts)

    def create_parameter_summary_plot(self, insights: AnalysisInsights,
                                      parameters: Tuple[str, ...] = ('temperature', 'salinity')) -> go.Figure:
        """Min / mean / max bars for the analysed parameters"""
        if insights is None:
            return self._create_empty_plot("Analysis not finished")

        labels = [f"{name.title()} ({insights.parameters[name].units})" for name in parameters]
        fig = go.Figure()
        for stat, color in (('min', '#06b6d4'), ('mean', '#2563eb'), ('max', '#1e3a8a')):
            fig.add_trace(go.Bar(
                name=stat.title(),
                x=labels,
                y=[getattr(insights.parameters[name], stat) for name in parameters],
                marker_color=color
            ))
        fig.update_layout(
            barmode='group',
            title="Oceanographic Parameters",
            height=400,
            template=self.template
        )
        return fig

    def _create_empty_map(self, center: Tuple[float, float] = (-27.6057, 78.8352)) -> folium.Map:
        """Create empty map with informative message"""
        m = folium.Map(location=list(center), zoom_start=3)
        folium.Marker(
            list(center),
            icon=folium.DivIcon(html='<div style="color: red; font-size: 16px;">No floats available</div>')
        ).add_to(m)
        return m

    def _create_empty_plot(self, message: str = "No data available") -> go.Figure:
        """Create empty plot with message"""
        fig = go.Figure()
        fig.add_annotation(
            text=message,
            xref="paper", yref="paper",
            x=0.5, y=0.5, xanchor='center', yanchor='middle',
            showarrow=False,
            font=dict(size=16, color="red")
        )
        fig.update_layout(
            plot_bgcolor='white',
            height=400,
            xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            yaxis=dict(showgrid=False, zeroline=False, showticklabels=False)
        )
        return fig

    def create_plot(self, plot_type: str, data: Any, **kwargs) -> Any:
        """Dispatch by plot type name"""
        plot_methods = {
            'profile': self.create_depth_profile_plot,
            'dual_profile': self.create_dual_profile_plot,
            'map': self.create_float_map,
            'parameters': self.create_parameter_summary_plot
        }
        if plot_type not in plot_methods:
            raise ValueError(f"Unknown plot type: {plot_type}")
        return plot_methods[plot_type](data, **kwargs)
