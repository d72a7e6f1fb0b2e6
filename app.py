"""
Relief Smart Dispatch - Operations Dashboard
============================================

Dashboard for planning drone supply sorties over relief zones.

Features:
- Location presets, custom base coordinates and random zone generation
- Click-to-add zones with a chosen priority and demand
- Configurable drone fleet (size, battery range, payload)
- KPI cards for coverage and battery usage
- Folium map with priority-colored zones and per-drone routes
- Per-drone route table

Run:
    streamlit run app.py
"""

import os
import sys
from typing import Any, Dict, List, Optional

import folium
import pandas as pd
import streamlit as st
from streamlit_folium import st_folium

# Ensure the package is importable
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from relief_dispatch import config
from relief_dispatch.exceptions import DispatchError
from relief_dispatch.models import Base, Priority, Zone
from relief_dispatch.optimizer import DeliveryOptimizer
from relief_dispatch.playback import route_coordinates
from relief_dispatch.results import OptimizationResult
from relief_dispatch.scenario import add_clicked_zone, generate_random_zones, get_preset

# =============================================================================
# PAGE CONFIG
# =============================================================================

st.set_page_config(
    page_title="Relief Smart Dispatch",
    page_icon="🚁",
    layout="wide",
    initial_sidebar_state="expanded"
)

# =============================================================================
# CUSTOM STYLING
# =============================================================================

st.markdown("""
<style>
    .main .block-container {
        padding-top: 2rem;
        padding-bottom: 2rem;
    }

    /* KPI Cards */
    .kpi-card {
        background: linear-gradient(135deg, #2563eb 0%, #7c3aed 100%);
        border-radius: 16px;
        padding: 1.5rem;
        color: white;
        text-align: center;
        box-shadow: 0 10px 40px rgba(37, 99, 235, 0.3);
    }

    .kpi-card.red {
        background: linear-gradient(135deg, #dc2626 0%, #f97316 100%);
        box-shadow: 0 10px 40px rgba(220, 38, 38, 0.3);
    }

    .kpi-card.green {
        background: linear-gradient(135deg, #059669 0%, #34d399 100%);
        box-shadow: 0 10px 40px rgba(5, 150, 105, 0.3);
    }

    .kpi-value {
        font-size: 2.5rem;
        font-weight: 800;
        margin: 0.5rem 0;
    }

    .kpi-label {
        font-size: 0.9rem;
        opacity: 0.9;
        text-transform: uppercase;
        letter-spacing: 1px;
    }

    .kpi-delta {
        font-size: 1rem;
        font-weight: 600;
        padding: 0.25rem 0.75rem;
        border-radius: 20px;
        background: rgba(255,255,255,0.2);
        display: inline-block;
        margin-top: 0.5rem;
    }

    .section-header {
        font-size: 1.5rem;
        font-weight: 700;
        color: #1a1a2e;
        margin: 2rem 0 1rem 0;
        padding-bottom: 0.5rem;
        border-bottom: 3px solid #2563eb;
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


# =============================================================================
# SESSION STATE
# =============================================================================

def get_optimizer() -> DeliveryOptimizer:
    """Optimizer kept across reruns so manually added zones survive."""
    if "optimizer" not in st.session_state:
        st.session_state["optimizer"] = DeliveryOptimizer()
    return st.session_state["optimizer"]


def invalidate_result() -> None:
    """Drop the last result once zones, base or fleet change."""
    st.session_state.pop("result", None)


def sync_base(optimizer: DeliveryOptimizer, lat: float, lng: float) -> None:
    """Move the base when the selected location changed. Zones are kept."""
    base = optimizer.base
    if base is None or base.location != (float(lat), float(lng)):
        optimizer.set_base(lat, lng)
        invalidate_result()


# =============================================================================
# MAP VISUALIZATION
# =============================================================================

def create_route_map(
    result: Optional[OptimizationResult],
    base: Base,
    zones: List[Zone],
    zoom: int
) -> folium.Map:
    """
    Create a Folium map of the scenario and, once optimized, its routes.

    - Base: blue home marker
    - Zones: colored by priority, dimmed when unserved
    - Routes: one color per drone, closed back to the base
    """
    m = folium.Map(
        location=[base.lat, base.lng],
        zoom_start=zoom,
        tiles='cartodbpositron'
    )

    folium.Marker(
        location=[base.lat, base.lng],
        popup=f"Drone Base<br>{base.lat:.4f}, {base.lng:.4f}",
        icon=folium.Icon(color="blue", icon="home"),
    ).add_to(m)

    # Zone markers
    unserved = set(result.unserved_zone_ids) if result is not None else set()
    zone_group = folium.FeatureGroup(name="Relief Zones")
    for zone in zones:
        if result is None:
            status = "pending"
        else:
            status = "unserved" if zone.zone_id in unserved else "served"
        folium.CircleMarker(
            location=[zone.lat, zone.lng],
            radius=8,
            color="white",
            weight=2,
            fill=True,
            fillColor=config.PRIORITY_COLORS[int(zone.priority)],
            fillOpacity=0.35 if zone.zone_id in unserved else 1.0,
            popup=(
                f"Zone {zone.zone_id} ({status})<br>Priority: {Priority(zone.priority).label}"
                f"<br>Demand: {zone.demand} units"
            ),
        ).add_to(zone_group)
    zone_group.add_to(m)

    if result is None:
        return m

    # Drone routes
    route_group = folium.FeatureGroup(name="Drone Routes")
    for idx, drone in enumerate(result.drones):
        if len(drone.route) < 2:
            continue
        folium.PolyLine(
            locations=route_coordinates(drone, base),
            weight=3,
            color=config.DRONE_COLORS[idx % len(config.DRONE_COLORS)],
            opacity=0.8,
            popup=f"Drone {drone.drone_id}: {drone.total_distance_km:.2f} km, {drone.zones_visited} zones",
        ).add_to(route_group)
    route_group.add_to(m)

    folium.LayerControl().add_to(m)
    return m


def handle_map_click(
    optimizer: DeliveryOptimizer,
    map_state: Optional[Dict[str, Any]],
    settings: Dict[str, Any]
) -> None:
    """Add a zone at a new map click while click mode is on."""
    clicked = (map_state or {}).get("last_clicked")
    if not clicked:
        return

    # st_folium keeps reporting the last click on every rerun
    key = (clicked.get("lat"), clicked.get("lng"))
    if st.session_state.get("last_click") == key:
        return
    st.session_state["last_click"] = key

    if not settings["click_mode"]:
        return

    try:
        zone = add_clicked_zone(optimizer, clicked, settings["priority"], settings["demand"])
    except DispatchError as e:
        st.error(f"Could not add zone: {e}")
        return

    invalidate_result()
    st.toast(f"Zone {zone.zone_id} added: {Priority(zone.priority).label}, {zone.demand} units")
    st.rerun()


# =============================================================================
# SIDEBAR
# =============================================================================

def render_sidebar(optimizer: DeliveryOptimizer) -> Dict[str, Any]:
    """Render the sidebar configuration panel and apply its actions."""
    st.sidebar.markdown("## 🎛️ Configuration")
    st.sidebar.markdown("---")

    st.sidebar.markdown("### 📍 Location")
    preset_key = st.sidebar.selectbox(
        "Disaster Area",
        options=list(config.LOCATION_PRESETS.keys()),
        index=list(config.LOCATION_PRESETS.keys()).index(config.DEFAULT_PRESET),
        format_func=lambda k: config.LOCATION_PRESETS[k]["name"],
    )
    preset = get_preset(preset_key)

    if preset_key == "custom":
        lat = st.sidebar.number_input(
            "Base Latitude", min_value=-90.0, max_value=90.0,
            value=float(preset["lat"]), step=0.01, format="%.4f"
        )
        lng = st.sidebar.number_input(
            "Base Longitude", min_value=-180.0, max_value=180.0,
            value=float(preset["lng"]), step=0.01, format="%.4f"
        )
    else:
        lat, lng = preset["lat"], preset["lng"]
    sync_base(optimizer, lat, lng)

    st.sidebar.markdown("### 🗺️ Zones")
    num_zones = st.sidebar.slider("Number of Zones", 1, 50, config.DEFAULT_ZONE_COUNT)
    seed = st.sidebar.number_input("Random Seed", min_value=0, value=42, step=1)
    if st.sidebar.button("🎲 Generate Random Zones", use_container_width=True):
        optimizer.clear_zones()
        generate_random_zones(optimizer, num_zones, seed=int(seed))
        invalidate_result()

    click_mode = st.sidebar.checkbox(
        "Click map to add zones",
        value=False,
        help="Each click on the map adds a zone with the priority and demand below"
    )
    zone_priority = st.sidebar.selectbox(
        "Zone Priority",
        options=[int(p) for p in Priority],
        format_func=lambda p: f"{Priority(p).label} (P{p})",
    )
    zone_demand = st.sidebar.number_input("Zone Demand (units)", min_value=1, max_value=500, value=30, step=5)

    if st.sidebar.button("🧹 Clear Zones", use_container_width=True):
        optimizer.clear_zones()
        invalidate_result()

    st.sidebar.markdown("---")
    st.sidebar.markdown("### 🚁 Fleet")
    num_drones = st.sidebar.slider("Number of Drones", 1, 10, config.DEFAULT_DRONE_COUNT)
    battery = st.sidebar.slider(
        "Battery Range (km)",
        min_value=10.0,
        max_value=200.0,
        value=float(config.DEFAULT_BATTERY_RANGE_KM),
        step=5.0,
        help="Maximum round-trip distance per drone"
    )
    payload = st.sidebar.slider(
        "Payload Capacity (units)",
        min_value=20,
        max_value=300,
        value=config.DEFAULT_PAYLOAD_CAPACITY,
        step=10,
        help="Maximum supplies per drone"
    )

    st.sidebar.markdown("---")
    if st.sidebar.button("🚀 Optimize Routes", use_container_width=True):
        try:
            optimizer.replace_fleet(num_drones, battery, payload)
            st.session_state["result"] = optimizer.optimize()
        except DispatchError as e:
            invalidate_result()
            st.sidebar.error(f"Optimization failed: {e}")

    return {
        "zoom": preset["zoom"],
        "click_mode": click_mode,
        "priority": int(zone_priority),
        "demand": int(zone_demand),
    }


# =============================================================================
# KPI DISPLAY
# =============================================================================

def render_kpi_row(result: OptimizationResult) -> None:
    """Render the top KPI cards."""
    s = result.summary
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.markdown(f"""
        <div class="kpi-card">
            <div class="kpi-label">Zones Served</div>
            <div class="kpi-value">{s.zones_served}/{s.total_zones}</div>
            <div class="kpi-delta">{len(result.unserved_zone_ids)} unserved</div>
        </div>
        """, unsafe_allow_html=True)

    with col2:
        st.markdown(f"""
        <div class="kpi-card red">
            <div class="kpi-label">Critical Served</div>
            <div class="kpi-value">{s.critical_served}/{s.total_critical}</div>
            <div class="kpi-delta">Priority 1</div>
        </div>
        """, unsafe_allow_html=True)

    with col3:
        st.markdown(f"""
        <div class="kpi-card green">
            <div class="kpi-label">Total Distance</div>
            <div class="kpi-value">{s.total_distance_km:.1f}</div>
            <div class="kpi-delta">km flown</div>
        </div>
        """, unsafe_allow_html=True)

    with col4:
        st.markdown(f"""
        <div class="kpi-card">
            <div class="kpi-label">Avg Battery Usage</div>
            <div class="kpi-value">{s.avg_battery_usage_pct:.1f}%</div>
            <div class="kpi-delta">{s.execution_time_ms:.2f} ms</div>
        </div>
        """, unsafe_allow_html=True)


# =============================================================================
# ROUTE TABLE
# =============================================================================

def render_route_table(result: OptimizationResult) -> None:
    """Render one row per drone."""
    st.markdown('<div class="section-header">📋 Drone Routes</div>', unsafe_allow_html=True)

    rows = [
        {
            "Drone": drone.drone_id,
            "Route": drone.route_label(),
            "Zones": drone.zones_visited,
            "Distance (km)": round(drone.total_distance_km, 2),
            "Battery Usage (%)": round(drone.battery_usage_pct, 1),
            "Delivered (units)": drone.total_delivered,
        }
        for drone in result.drones
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    coverage = pd.DataFrame([
        {
            "Priority": f"{p.label} (P{int(p)})",
            "Served": result.summary.served_by_priority[p],
            "Total": result.summary.total_by_priority[p],
        }
        for p in Priority
    ])
    st.dataframe(coverage, use_container_width=True, hide_index=True)


# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    """Main application entry point."""
    st.markdown("""
    <div style="text-align: center; padding: 1rem 0 2rem 0;">
        <h1 style="font-size: 3rem; font-weight: 800; margin-bottom: 0.5rem;">
            🚁 Relief Smart Dispatch
        </h1>
        <p style="font-size: 1.2rem; color: #666; max-width: 700px; margin: 0 auto;">
            Priority-aware drone routing for disaster relief supplies
        </p>
    </div>
    """, unsafe_allow_html=True)

    optimizer = get_optimizer()
    settings = render_sidebar(optimizer)
    result: Optional[OptimizationResult] = st.session_state.get("result")

    if result is not None:
        render_kpi_row(result)
    else:
        col1, col2, col3 = st.columns([1, 2, 1])
        with col2:
            st.info(
                "Generate random zones or turn on click mode and click the map, "
                "then click **Optimize Routes**."
            )

    st.markdown('<div class="section-header">🗺️ Route Map</div>', unsafe_allow_html=True)
    base = optimizer.base
    st.caption(f"Base {base.lat:.4f}, {base.lng:.4f} · {len(optimizer.zones)} zones")
    route_map = create_route_map(result, base, optimizer.zones, settings["zoom"])
    map_state = st_folium(
        route_map,
        width=None,
        height=550,
        use_container_width=True,
        returned_objects=["last_clicked"],
    )
    handle_map_click(optimizer, map_state, settings)

    if result is not None:
        render_route_table(result)

    st.markdown("---")
    st.markdown("""
    <div style="text-align: center; color: #888; padding: 1rem;">
        Greedy priority nearest neighbor + bounded 2-opt
    </div>
    """, unsafe_allow_html=True)


if __name__ == "__main__":
    main()
