# streamlit_app/main.py

import streamlit as st
from streamlit_folium import st_folium
from datetime import date
import time
import logging

from floatchat.analysis.netcdf_analysis import (AnalysisStatus, UploadedFile, accepts,
                                                render_report, report_filename)
from floatchat.config import config
from floatchat.data.fixtures import (SampleFloatProvider, floats_dataframe, map_statistics,
                                     metric_numeric_value)
from floatchat.data.profile_synthesizer import profile_summary, profile_to_dataframe
from floatchat.exceptions import UnknownFloatError
from floatchat.nlp.chat_responder import ChatResponder
from floatchat.state.view_state import (AnalysisViewState, ChatViewState, DashboardViewState,
                                        MapBounds, MapViewState, ProfileViewState)
from floatchat.utils.helpers import ArgoHelpers
from floatchat.visualization.plot_generator import FloatChatPlotGenerator

# Configure page
st.set_page_config(
    page_title="FloatChat Dashboard",
    page_icon="🌊",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS for styling
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        color: #1f77b4;
        text-align: center;
        margin-bottom: 1rem;
        font-weight: bold;
    }
    .section-header {
        font-size: 1.5rem;
        color: #2e86ab;
        margin-top: 1.5rem;
        margin-bottom: 1rem;
        font-weight: bold;
    }
    .data-card {
        background-color: #f0f2f6;
        padding: 0.75rem 1rem;
        border-radius: 10px;
        border-left: 4px solid #06b6d4;
        margin: 0.5rem 0;
    }
    .status-active { color: #16a34a; font-weight: bold; }
    .status-processing { color: #ca8a04; font-weight: bold; }
    .status-inactive { color: #6b7280; font-weight: bold; }
</style>
""", unsafe_allow_html=True)

PAGES = ["Chat", "Dashboard", "Maps", "NetCDF Analysis", "Depth Profile"]


class FloatChatDashboard:
    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.float_provider = SampleFloatProvider()
        self.plot_generator = FloatChatPlotGenerator()
        self.initialize_state()

    def initialize_state(self):
        """Create one view state struct per page"""
        if 'chat_state' not in st.session_state:
            st.session_state.chat_state = ChatViewState()
        if 'dashboard_state' not in st.session_state:
            st.session_state.dashboard_state = DashboardViewState()
        if 'map_state' not in st.session_state:
            st.session_state.map_state = MapViewState()
        if 'analysis_state' not in st.session_state:
            st.session_state.analysis_state = AnalysisViewState()
        if 'profile_state' not in st.session_state:
            profile_state = ProfileViewState(float_id=config.get('profile.default_float_id', '4902345'))
            profile_state.apply()
            st.session_state.profile_state = profile_state

    def render_sidebar(self) -> str:
        # Page switches requested by buttons must land before the radio is drawn
        if 'pending_page' in st.session_state:
            st.session_state.current_page = st.session_state.pop('pending_page')

        with st.sidebar:
            st.markdown('<div class="main-header">🌊 FloatChat</div>', unsafe_allow_html=True)
            st.caption(f"{config.get('chat.active_floats_badge', 247)} Active Floats")

            st.markdown("### Navigation")
            page = st.radio("Page", PAGES, key="current_page", label_visibility="collapsed")

            st.markdown("---")
            st.markdown("### Sample Floats")
            for record in self.float_provider.list_floats():
                st.markdown(f"`{record.float_id}` {record.region}")

        return page

    # Chat

    def render_chat(self, chat_state: ChatViewState):
        st.markdown('<div class="section-header">💬 FloatChat Assistant</div>', unsafe_allow_html=True)
        session = chat_state.session

        for message in session.messages:
            role = "assistant" if message.is_bot else "user"
            with st.chat_message(role):
                st.markdown(message.content)

                if message.response is not None and message.response.has_data:
                    st.markdown(f"**{message.response.kind.value.upper()} Data**")
                    for line in ChatResponder.describe_payload(message.response):
                        st.markdown(f"- {line}")

                st.caption(message.timestamp.strftime("%H:%M:%S"))

                if message.is_bot and message.message_id != session.messages[0].message_id:
                    col1, col2, _ = st.columns([1, 1, 6])
                    with col1:
                        flag_label = "🚩 Unflag" if session.is_flagged(message.message_id) else "🏳️ Flag"
                        if st.button(flag_label, key=f"flag_{message.message_id}"):
                            session.toggle_flag(message.message_id)
                            st.rerun()
                    with col2:
                        if st.button("🔄 Retry", key=f"retry_{message.message_id}"):
                            with st.spinner("FloatChat is typing..."):
                                time.sleep(config.get('chat.retry_delay_seconds', 0.8))
                                session.retry(message.message_id)
                            st.rerun()

        if session.is_fresh:
            st.markdown("**Try asking:**")
            queries = session.sample_queries[:config.get('chat.sample_query_count', 3)]
            cols = st.columns(len(queries))
            for i, query in enumerate(queries):
                with cols[i]:
                    label = query if len(query) <= 40 else f"{query[:40]}..."
                    if st.button(label, key=f"sample_{i}", use_container_width=True):
                        chat_state.choose_sample(query)
                        st.session_state.chat_input = query

        with st.form("chat_form", clear_on_submit=True):
            text = st.text_input("Ask about ARGO float data", key="chat_input")
            submitted = st.form_submit_button("Send")

        if submitted:
            chat_state.input_value = text
            if text.strip():
                with st.spinner("FloatChat is typing..."):
                    time.sleep(config.get('chat.typing_delay_seconds', 1.5))
                    chat_state.submit()
                st.rerun()

    # Dashboard

    def render_dashboard(self, dashboard_state: DashboardViewState):
        st.markdown('<div class="section-header">📊 Ocean Data Dashboard</div>', unsafe_allow_html=True)

        if not st.session_state.get('dashboard_loaded'):
            progress = st.progress(0, text="Loading dashboard data...")
            for value in range(0, 101, 10):
                progress.progress(value, text=f"Loading dashboard data... {value}%")
                time.sleep(0.05)
            progress.empty()
            st.session_state.dashboard_loaded = True

        cols = st.columns(len(dashboard_state.metrics))
        for col, metric in zip(cols, dashboard_state.metrics):
            with col:
                value = metric['value']
                if metric['title'] == 'Active Floats':
                    value = f"{metric_numeric_value(value):,}"
                st.metric(metric['title'], value, metric['change'], delta_color="off")

        col1, col2 = st.columns(2)
        with col1:
            st.markdown("### Recent Profiles")
            for profile in dashboard_state.recent:
                st.markdown(
                    f'<div class="data-card"><b>Float {profile["id"]}</b> · {profile["location"]}<br>'
                    f'<span class="status-{profile["status"]}">{profile["status"]}</span> · '
                    f'{profile["time"]} · Depth: {profile["depth"]}</div>',
                    unsafe_allow_html=True
                )
                if st.button(f"View profile {profile['id']}", key=f"recent_{profile['id']}"):
                    st.session_state.profile_state.update(float_id=profile['id'])
                    st.session_state.pending_page = "Depth Profile"
                    st.rerun()

        with col2:
            st.markdown("### Integration Status")
            for integration in dashboard_state.integrations:
                c1, c2 = st.columns([3, 1])
                with c1:
                    st.markdown(f"**{integration['name']}** · {integration['status']}")
                with c2:
                    if integration['connectable']:
                        st.button("Connect", key=f"connect_{integration['name']}", disabled=True)

        st.markdown("### Sample Float Table")
        st.dataframe(floats_dataframe(self.float_provider), use_container_width=True)

    # Maps

    def render_maps(self, map_state: MapViewState):
        st.markdown('<div class="section-header">🗺️ ARGO Float Map</div>', unsafe_allow_html=True)
        st.caption("Interactive map for exploring oceanographic data in the Indian Ocean")

        col1, col2 = st.columns([3, 1])
        with col1:
            show_trajectories = st.toggle("Show trajectories", value=True)
            only_active = st.toggle("Active floats only", value=False)
            floats = self.float_provider.list_floats()
            if only_active:
                floats = [record for record in floats if record.is_active]

            float_map = self.plot_generator.create_float_map(
                floats, center=map_state.center, zoom=map_state.zoom,
                show_trajectories=show_trajectories
            )
            map_data = st_folium(float_map, height=550, width=None,
                                 returned_objects=["last_clicked", "center", "zoom", "bounds"])
            self._sync_map_state(map_state, map_data)

        with col2:
            st.markdown("### Float Statistics")
            for label, value in map_statistics().items():
                st.markdown(f"**{label}:** {value}")

            st.markdown("### Current View")
            st.markdown(f"**Center:** {ArgoHelpers.format_coordinates(*map_state.center)}")
            st.markdown(f"**Zoom:** {map_state.zoom}")
            if map_state.bounds:
                st.markdown(
                    f"North: {map_state.bounds.north:.2f}° · South: {map_state.bounds.south:.2f}°  \n"
                    f"East: {map_state.bounds.east:.2f}° · West: {map_state.bounds.west:.2f}°"
                )
            if map_state.clicked:
                st.markdown(f"**Clicked Point:** {ArgoHelpers.format_coordinates(*map_state.clicked)}")
            st.caption("Click anywhere on the map to get coordinates for the chat assistant")

            float_ids = [record.float_id for record in floats]
            if float_ids:
                selected = st.selectbox("Open depth profile", float_ids)
                if st.button("View profile", use_container_width=True):
                    st.session_state.profile_state.update(float_id=selected)
                    st.session_state.pending_page = "Depth Profile"
                    st.rerun()

    def _sync_map_state(self, map_state: MapViewState, map_data):
        if not map_data:
            return
        try:
            center = map_data.get('center')
            if center and map_data.get('zoom') is not None:
                bounds = map_data.get('bounds') or {}
                north_east = bounds.get('_northEast') or {}
                south_west = bounds.get('_southWest') or {}
                map_bounds = None
                if north_east and south_west:
                    map_bounds = MapBounds(north=north_east['lat'], south=south_west['lat'],
                                           east=north_east['lng'], west=south_west['lng'])
                map_state.update_view((center['lat'], center['lng']), map_data['zoom'], map_bounds)

            clicked = map_data.get('last_clicked')
            if clicked:
                map_state.click(clicked['lat'], clicked['lng'])
        except (KeyError, TypeError, ValueError) as e:
            self.logger.warning(f"Ignoring map event: {e}")

    # NetCDF analysis

    def render_netcdf_analysis(self, analysis_state: AnalysisViewState):
        st.markdown('<div class="section-header">📁 NetCDF Analysis</div>', unsafe_allow_html=True)
        st.markdown("Upload any NetCDF file and get clear, easy-to-understand insights from your ocean data")
        session = analysis_state.session

        uploaded = st.file_uploader(
            "Upload NetCDF Files",
            type=['nc', 'netcdf'],
            accept_multiple_files=True,
            help="Supports .nc and .netcdf files"
        )

        if st.button("🚀 Analyze Files", type="primary"):
            known = {f.name for f in session.uploaded_files}
            files = [
                UploadedFile(name=f.name, size=f.size, content_type=f.type or '')
                for f in (uploaded or []) if f.name not in known and accepts(f.name)
            ]
            if not files:
                st.warning("Please select new NetCDF files to analyze")
            else:
                self._simulate_processing(session, session.add_files(files))

        if session.uploaded_files:
            st.markdown(f"### Uploaded Files ({len(session.uploaded_files)})")
            for uploaded_file in list(session.uploaded_files):
                c1, c2 = st.columns([5, 1])
                with c1:
                    st.markdown(f"📄 **{uploaded_file.name}** · {uploaded_file.display_size}")
                with c2:
                    if st.button("✖", key=f"remove_{uploaded_file.name}"):
                        session.remove_file(uploaded_file.name)
                        st.rerun()

        for result in session.completed_results():
            self._render_analysis_result(result)

    def _simulate_processing(self, session, results):
        interval = config.get('analysis.progress_interval_seconds', 0.2)
        stagger = config.get('analysis.stagger_seconds', 1.0)
        for index, result in enumerate(results):
            if index:
                time.sleep(stagger)
            bar = st.progress(0, text=f"Analyzing {result.file_name}...")
            while result.status is AnalysisStatus.PROCESSING:
                session.advance(result.result_id)
                bar.progress(result.progress, text=f"Analyzing {result.file_name}... {result.progress}%")
                time.sleep(interval)
            bar.empty()
            st.success(f"Analysis completed: {result.file_name}")

    def _render_analysis_result(self, result):
        insights = result.insights
        with st.expander(f"✅ {result.file_name}", expanded=True):
            st.markdown(insights.summary)

            cols = st.columns(4)
            for col, name in zip(cols, ('temperature', 'salinity', 'pressure', 'depth')):
                stats = insights.parameters[name]
                with col:
                    st.metric(name.title(), f"{stats.mean:g} {stats.units}",
                              f"{stats.min:g} - {stats.max:g}", delta_color="off")

            st.plotly_chart(self.plot_generator.create_parameter_summary_plot(insights),
                            use_container_width=True)

            st.markdown("#### Key Findings")
            for finding in insights.key_findings:
                st.markdown(f"- {finding}")

            spatial = insights.spatial_coverage
            st.markdown(
                f"**Spatial coverage:** {spatial.latitude.min}° to {spatial.latitude.max}° lat, "
                f"{spatial.longitude.min}° to {spatial.longitude.max}° lon, "
                f"{spatial.depth.min:g}m to {spatial.depth.max:g}m"
            )
            temporal = insights.temporal_coverage
            st.markdown(f"**Temporal coverage:** {temporal.start} → {temporal.end} ({temporal.duration})")
            quality = insights.data_quality
            st.markdown(f"**Data quality:** {quality.completeness}% complete, {quality.accuracy}% accurate "
                        f"· {', '.join(quality.flags)}")

            st.markdown("#### Recommendations")
            for recommendation in insights.recommendations:
                st.markdown(f"- {recommendation}")

            st.download_button(
                label="📥 Download Report",
                data=render_report(result),
                file_name=report_filename(result.file_name),
                mime="text/plain",
                key=f"download_{result.result_id}"
            )

    # Depth profile

    def render_depth_profile(self, profile_state: ProfileViewState):
        st.markdown(f'<div class="section-header">🌡️ Float {profile_state.float_id} Depth Profile</div>',
                    unsafe_allow_html=True)

        with st.form("profile_form"):
            c1, c2, c3, c4 = st.columns(4)
            with c1:
                float_id = st.text_input("Float", value=profile_state.float_id)
            with c2:
                profile_date = st.date_input("Date", value=date.fromisoformat(profile_state.date))
            with c3:
                max_depth = st.number_input("Max depth (m)", min_value=0, value=profile_state.max_depth, step=100)
            with c4:
                metric = st.selectbox("Metric", ["temperature", "salinity"],
                                      index=["temperature", "salinity"].index(profile_state.metric),
                                      format_func=str.title)
            applied = st.form_submit_button("Apply")

        if applied:
            try:
                profile_state.update(float_id=float_id.strip() or profile_state.float_id,
                                     date=profile_date.isoformat(), max_depth=max_depth, metric=metric)
            except ValueError as e:
                st.error(str(e))

        col1, col2 = st.columns([1, 3])
        with col1:
            try:
                record = self.float_provider.get_float(profile_state.float_id)
                st.markdown(f"**{record.name}** · {record.region}")
            except UnknownFloatError:
                st.caption("Float not in the sample fleet; showing a synthetic profile")

            st.markdown("#### How to read this")
            st.markdown(
                "These plots show how measurements change with depth. Depth increases downward.  \n"
                "**Blue line**: Temperature (°C) vs depth (m). Oceans are warmer near the surface and cool with depth.  \n"
                "**Green line**: Salinity (PSU) vs depth (m). Salinity tends to increase slightly with depth."
            )
            st.markdown("#### Annotations")
            st.markdown(
                "**Surface mixed layer**: Top ~50–200 m with small temperature change.  \n"
                "**Thermocline**: Rapid temperature drop typically between 200–1000 m.  \n"
                "**Deep layer**: Below ~1000 m, temperature changes slowly."
            )

            summary = profile_summary(profile_state.rows)
            if summary:
                st.metric("Surface temperature", f"{summary['surface']['temperature']:.2f} °C")
                st.metric("Surface salinity", f"{summary['surface']['salinity']:.2f} PSU")
                st.caption(f"{summary['samples']} samples every {summary['step']} m")

        with col2:
            fig = self.plot_generator.create_depth_profile_plot(profile_state.rows, profile_state.metric)
            st.plotly_chart(fig, use_container_width=True)

            with st.expander("Profile data"):
                st.dataframe(profile_to_dataframe(profile_state.rows), use_container_width=True)

    def run(self):
        """Main application runner"""
        page = self.render_sidebar()

        if page == "Chat":
            self.render_chat(st.session_state.chat_state)
        elif page == "Dashboard":
            self.render_dashboard(st.session_state.dashboard_state)
        elif page == "Maps":
            self.render_maps(st.session_state.map_state)
        elif page == "NetCDF Analysis":
            self.render_netcdf_analysis(st.session_state.analysis_state)
        elif page == "Depth Profile":
            self.render_depth_profile(st.session_state.profile_state)


# Run the application
if __name__ == "__main__":
    dashboard = FloatChatDashboard()
    dashboard.run()
