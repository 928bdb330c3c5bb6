# streamlit_app.py
"""
Streamlit dashboard for dataset quality analysis.
Run:
    streamlit run streamlit_app.py
The analysis API is read from DQDASH_API_URL (default http://localhost:8000/api).
"""

import streamlit as st

from dqdash.api.http_client import create_client
from dqdash.api.validation import file_size, format_size
from dqdash.config import CONFIG
from dqdash.dashboard.controller import DashboardController
from dqdash.dashboard.state import ConnectivityState, DashboardState
from dqdash.report.models import RECOMMENDATION_BUCKETS
from dqdash.reporting import charts
from dqdash.reporting.exporter import Exporter
from dqdash.utils import setup_logging

# ---------- Page config & CSS ----------
st.set_page_config(page_title="Dataset Quality Dashboard", layout="wide")
st.markdown(
    """
    <style>
    .small-muted { color: #7a7f87; font-size: 0.9rem; }
    .status-online { color: #16a34a; font-weight: 600; }
    .status-offline { color: #dc2626; font-weight: 600; }
    .status-unknown { color: #ca8a04; font-weight: 600; }
    .big-number { font-size: 2.4rem; font-weight: 700; color: #fb923c; }
    </style>
    """,
    unsafe_allow_html=True,
)

# ---------- Session wiring ----------
@st.cache_resource
def get_client():
    setup_logging(CONFIG.log_level)
    return create_client(CONFIG)

if "dashboard" not in st.session_state:
    st.session_state.dashboard = DashboardState()

controller = DashboardController(get_client(), st.session_state.dashboard,
                                 max_file_size=CONFIG.max_upload_bytes)
controller.startup()
state = controller.state

STATUS_LABELS = {
    ConnectivityState.ONLINE: "🟢 API connected",
    ConnectivityState.OFFLINE: "🔴 API disconnected",
    ConnectivityState.UNKNOWN: "🟡 Checking...",
}

def on_file_change():
    controller.select_file(st.session_state.get("csv_file"))

# ---------- Helpers ----------
def show_chart(fig, empty_text="Nothing to plot."):
    if fig is None:
        st.caption(empty_text)
    else:
        st.plotly_chart(fig, use_container_width=True)

def render_report(report):
    info = report.basic_info
    c1, c2, c3 = st.columns(3)
    with c1:
        st.subheader("Basic Information")
        rows = info.get("total_rows", 0)
        st.metric("Rows", f"{rows:,}" if isinstance(rows, int) else str(rows))
        st.metric("Columns", info.get("total_columns", 0))
        st.write(f"**Size:** {info.get('file_size', '-')}")
        st.markdown("**Data types**")
        show_chart(charts.plot_data_types(report), "No data type information.")

    with c2:
        st.subheader("Quality Metrics")
        for metric, score in charts.quality_scores(report).items():
            level = charts.quality_level(score)
            icon = {"good": "✅", "warning": "⚠️", "poor": "❌"}[level]
            st.markdown(
                f"{icon} {metric.capitalize()}: "
                f"<span style='color:{charts.QUALITY_COLORS[level]};font-weight:700'>{score:.1f}%</span>",
                unsafe_allow_html=True,
            )
        show_chart(charts.plot_quality_scores(report), "No quality scores.")

    with c3:
        st.subheader("Missing Values")
        st.write(f"**Total missing:** {report.missing_data.get('total_missing_percentage', 0)}%")
        show_chart(charts.plot_missing(report), "No missing values reported.")

    c4, c5, c6 = st.columns(3)
    with c4:
        st.subheader("Duplicates")
        st.markdown(f"<div class='big-number'>{report.duplicates.get('total_duplicates', 0)}</div>",
                    unsafe_allow_html=True)
        st.write(f"{report.duplicates.get('percentage', 0)}% of the dataset")
        contributing = report.duplicates.get("columns_contributing") or []
        if contributing:
            st.markdown("**Contributing columns:**")
            for col in contributing:
                st.write(f"- {col}")

    with c5:
        st.subheader("Outliers")
        show_chart(charts.plot_outliers(report), "No outliers reported.")

    with c6:
        st.subheader("Top Correlations")
        show_chart(charts.plot_correlations(report), "No correlations reported.")

    stats_df = charts.column_statistics_frame(report)
    if not stats_df.empty:
        st.markdown("---")
        st.subheader("Column Statistics")
        st.dataframe(stats_df)

    st.markdown("---")
    st.subheader("Treatment Recommendations")
    rec_cols = st.columns(len(RECOMMENDATION_BUCKETS))
    for bucket, col in zip(RECOMMENDATION_BUCKETS, rec_cols):
        with col:
            st.markdown(f"**{bucket.capitalize()}**")
            for line in charts.recommendation_lines(report, bucket):
                st.write(f"• {line}")

    # downloads
    st.markdown("---")
    st.subheader("Downloads")
    stem = (report.name or "analysis").rsplit(".", 1)[0]
    d1, d2, d3 = st.columns(3)
    with d1:
        st.download_button("Download analysis.json", data=Exporter.to_json(report),
                           file_name=f"{stem}_analysis.json", mime="application/json")
    with d2:
        st.download_button("Download column_statistics.csv", data=Exporter.to_csv(report),
                           file_name=f"{stem}_column_statistics.csv", mime="text/csv")
    with d3:
        st.download_button("Download report.html", data=Exporter.to_html(report),
                           file_name=f"{stem}_report.html", mime="text/html")

# ---------- UI: header ----------
st.title("📊 Dataset Quality Dashboard")
st.markdown("Analyze the quality of your data and decide which treatment it needs.")
st.markdown(
    f"<span class='status-{state.connectivity.value}'>{STATUS_LABELS[state.connectivity]}</span>",
    unsafe_allow_html=True,
)

# sidebar controls
st.sidebar.header("Connection")
st.sidebar.write(f"API: `{CONFIG.api_url}`" if CONFIG.api_mode != "mock" else "API: mock client")
if st.sidebar.button("Retry connection", disabled=state.upload.loading):
    controller.retry_connection()
    st.rerun()

st.sidebar.header("Previous analyses")
if st.sidebar.button("Load history", disabled=state.connectivity == ConnectivityState.OFFLINE):
    controller.load_history()
    st.rerun()
if state.history:
    labels = {s.label: s.id for s in state.history}
    choice = st.sidebar.selectbox("Analysis", list(labels.keys()))
    if st.sidebar.button("Open"):
        controller.open_analysis(labels[choice])
        st.rerun()

# upload area
st.file_uploader("Select a CSV file", type=["csv"], key="csv_file", on_change=on_file_change)

selected = state.upload.file
if selected is not None:
    st.write(f"**{selected.name}** - {format_size(file_size(selected))}")
    offline = state.connectivity == ConnectivityState.OFFLINE
    label = "API disconnected" if offline else "Analyze Dataset"
    if st.button(label, disabled=state.upload.loading or offline):
        with st.spinner("Processing file... this can take a few moments"):
            controller.analyze()
        st.rerun()
else:
    st.info("Upload a CSV file to analyze it.")

if state.upload.error:
    st.error(state.upload.error)
    if state.connectivity == ConnectivityState.OFFLINE:
        st.markdown(
            "<div class='small-muted'>"
            f"• Check that the analysis server is running at {CONFIG.api_url}<br>"
            "• Check that CORS / network access to the API is allowed<br>"
            "• Look at the backend logs for more details"
            "</div>",
            unsafe_allow_html=True,
        )

if CONFIG.debug:
    with st.expander("Debug info"):
        st.write(f"API URL: {CONFIG.api_url}")
        st.write(f"API status: {state.connectivity.value}")
        st.write(f"Selected file: {selected.name + ' (' + format_size(file_size(selected)) + ')' if selected is not None else 'None'}")

if state.report is not None:
    st.markdown("---")
    render_report(state.report)

# small footer
st.markdown("---")
st.caption("Analysis is computed by the remote API; this dashboard only renders the report.")
