"""
Map Visualization Module for Civic Reporter

Generates interactive maps using Folium to display citizen reports
colored by their workflow status.
"""

import html
import logging
from typing import Optional

import folium
from folium.plugins import MarkerCluster

from src.core.constants import DEFAULT_MAP_CENTER, STATUS_COLORS

logger = logging.getLogger(__name__)


def get_status_color(status: str) -> str:
    """Get marker color for a report status."""
    return STATUS_COLORS.get(status, "gray")


def _status_value(report) -> str:
    status = report.status
    return status.value if hasattr(status, "value") else str(status)


def create_reports_map(
    reports: list,
    center: Optional[tuple[float, float]] = None,
    zoom: int = 12,
    title: str = "Civic Reporter - Reported Issues",
    cluster_markers: bool = True,
) -> folium.Map:
    """
    Create an interactive map with citizen reports.

    Args:
        reports: List of Report objects
        center: Map center (lat, lon). Auto-calculated if None.
        zoom: Initial zoom level (1-18)
        title: Map title
        cluster_markers: Cluster markers when zoomed out

    Returns:
        Folium Map object
    """
    if not reports:
        logger.warning("No reports provided, creating empty map")
        return folium.Map(location=center or DEFAULT_MAP_CENTER, zoom_start=5)

    if center is None:
        lats = [r.latitude for r in reports]
        lons = [r.longitude for r in reports]
        center = (sum(lats) / len(lats), sum(lons) / len(lons))

    report_map = folium.Map(
        location=center,
        zoom_start=zoom,
        tiles="OpenStreetMap",
    )

    if cluster_markers:
        marker_group = MarkerCluster(name="Reports")
    else:
        marker_group = folium.FeatureGroup(name="Reports")

    for report in reports:
        status = _status_value(report)
        color = get_status_color(status)

        address = f"<b>Address:</b> {html.escape(report.address)}<br>" if report.address else ""
        reported = report.created_at.strftime("%Y-%m-%d %H:%M") if report.created_at else "-"

        popup_html = f"""
        <div style="font-family: Arial; min-width: 200px;">
            <h4 style="margin: 0;">{html.escape(report.title)}</h4>
            <hr style="margin: 5px 0;">
            <b>Status:</b> {status}<br>
            <b>Location:</b> {report.latitude:.5f}, {report.longitude:.5f}<br>
            {address}
            <b>Reported:</b> {reported} UTC<br>
            <b>Description:</b> {html.escape(report.description)}
        </div>
        """

        folium.CircleMarker(
            location=[report.latitude, report.longitude],
            radius=9,
            popup=folium.Popup(popup_html, max_width=300),
            color=color,
            fill=True,
            fill_color=color,
            fill_opacity=0.7,
            weight=2,
        ).add_to(marker_group)

    marker_group.add_to(report_map)

    title_html = f'''
    <div style="position: fixed;
                top: 10px; left: 50px;
                background-color: rgba(255,255,255,0.9);
                padding: 10px 20px;
                border-radius: 5px;
                z-index: 9999;
                font-family: Arial;">
        <h3 style="margin: 0;">{html.escape(title)}</h3>
        <p style="margin: 5px 0 0 0; color: #555; font-size: 12px;">
            {len(reports)} reports
        </p>
    </div>
    '''
    report_map.get_root().html.add_child(folium.Element(title_html))

    legend_rows = "".join(
        f'<span style="color: {color};">●</span> {status.replace("_", " ").title()}<br>'
        for status, color in STATUS_COLORS.items()
    )
    legend_html = f'''
    <div style="position: fixed;
                bottom: 30px; right: 30px;
                background-color: rgba(255,255,255,0.9);
                padding: 10px;
                border-radius: 5px;
                z-index: 9999;
                font-family: Arial;
                font-size: 12px;">
        <b>Report Status</b><br>
        {legend_rows}
    </div>
    '''
    report_map.get_root().html.add_child(folium.Element(legend_html))

    logger.info(f"Created map with {len(reports)} reports")
    return report_map
