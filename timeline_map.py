"""Streamlit map: frame-by-frame playback of drone sorties on a seeded scenario.

Run:
    streamlit run timeline_map.py

Shows the base, the relief zones and each drone flying its optimized route,
with a slider to scrub through the flight.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import pydeck as pdk
import streamlit as st

from relief_dispatch import config
from relief_dispatch.optimizer import DeliveryOptimizer
from relief_dispatch.playback import build_flight_frames, route_coordinates
from relief_dispatch.scenario import generate_random_zones, get_preset


def _hex_to_rgb(color: str) -> List[int]:
    color = color.lstrip("#")
    return [int(color[i:i + 2], 16) for i in (0, 2, 4)]


# -----------------------------------------------------------------------------
# Playback engine
# -----------------------------------------------------------------------------

def run_with_playback(
    preset_key: str,
    num_zones: int,
    seed: int,
    num_drones: int,
    battery_range_km: float,
    payload_capacity: int,
) -> Dict:
    preset = get_preset(preset_key)

    optimizer = DeliveryOptimizer()
    base = optimizer.set_base(preset["lat"], preset["lng"])
    generate_random_zones(optimizer, num_zones, seed=seed)
    optimizer.replace_fleet(num_drones, battery_range_km, payload_capacity)
    result = optimizer.optimize()

    unserved = set(result.unserved_zone_ids)
    colors = {
        drone.drone_id: _hex_to_rgb(config.DRONE_COLORS[idx % len(config.DRONE_COLORS)])
        for idx, drone in enumerate(result.drones)
    }

    frames = [
        {
            "positions": {d: list(pos) for d, pos in frame.positions.items()},
            "in_flight": list(frame.in_flight),
        }
        for frame in build_flight_frames(result, base)
    ]

    return {
        "center": (base.lat, base.lng),
        "zoom": preset["zoom"],
        "zones": [
            {
                "position": [z.lng, z.lat],
                "label": f"Zone {z.zone_id} · P{int(z.priority)} · {z.demand} units",
                "color": _hex_to_rgb(config.PRIORITY_COLORS[int(z.priority)])
                + [90 if z.zone_id in unserved else 230],
            }
            for z in optimizer.zones
        ],
        "routes": [
            {
                "path": [[lng, lat] for lat, lng in route_coordinates(drone, base)],
                "label": f"Drone {drone.drone_id} · {drone.total_distance_km:.2f} km",
                "color": colors[drone.drone_id],
            }
            for drone in result.drones
            if len(drone.route) >= 2
        ],
        "colors": colors,
        "drones": [
            {
                "id": drone.drone_id,
                "route": drone.route_label(),
                "distance": drone.total_distance_km,
                "battery": drone.battery_usage_pct,
            }
            for drone in result.drones
        ],
        "summary": result.to_dict(),
        "frames": frames,
    }


@st.cache_data(show_spinner=False)
def get_playback(
    preset_key: str,
    num_zones: int,
    seed: int,
    num_drones: int,
    battery_range_km: float,
    payload_capacity: int,
) -> Dict:
    return run_with_playback(preset_key, num_zones, seed, num_drones, battery_range_km, payload_capacity)


# -----------------------------------------------------------------------------
# Map helpers
# -----------------------------------------------------------------------------

def base_layer(center: Tuple[float, float]) -> pdk.Layer:
    return pdk.Layer(
        "ScatterplotLayer",
        [{"position": [center[1], center[0]], "label": "Base", "color": list(config.BASE_COLOR_RGB)}],
        get_position="position",
        get_fill_color="color",
        get_radius=600,
        pickable=True,
        stroked=True,
        filled=True,
        line_width_min_pixels=2,
    )


def zone_layer(zones: List[Dict]) -> pdk.Layer:
    return pdk.Layer(
        "ScatterplotLayer",
        zones,
        get_position="position",
        get_fill_color="color",
        get_radius=400,
        pickable=True,
    )


def route_layer(routes: List[Dict]) -> pdk.Layer:
    return pdk.Layer(
        "PathLayer",
        routes,
        get_path="path",
        get_color="color",
        width_min_pixels=2,
        opacity=0.5,
        pickable=True,
    )


def drone_layer(frame: Dict, colors: Dict[int, List[int]]) -> pdk.Layer:
    data = [
        {
            "position": [pos[1], pos[0]],
            "label": f"Drone {drone_id} ({'flying' if drone_id in frame['in_flight'] else 'at base'})",
            "color": colors[drone_id],
        }
        for drone_id, pos in frame["positions"].items()
    ]
    return pdk.Layer(
        "ScatterplotLayer",
        data,
        get_position="position",
        get_fill_color="color",
        get_radius=500,
        pickable=True,
        stroked=True,
        filled=True,
        line_width_min_pixels=1,
    )


# -----------------------------------------------------------------------------
# UI
# -----------------------------------------------------------------------------

st.set_page_config(page_title="Drone Flight Playback", page_icon="🗺️", layout="wide")
st.title("🗺️ Drone Flight Playback")
st.write("**Demo:** seeded relief scenario. Drones depart one after another and return to base.")

col_a, col_b, col_c = st.columns(3)
with col_a:
    preset_key = st.selectbox(
        "Disaster Area",
        options=[k for k in config.LOCATION_PRESETS if k != "custom"],
        format_func=lambda k: config.LOCATION_PRESETS[k]["name"],
    )
with col_b:
    num_zones = st.slider("Zones", 1, 30, config.DEFAULT_ZONE_COUNT)
    seed = st.number_input("Seed", min_value=0, value=42, step=1)
with col_c:
    num_drones = st.slider("Drones", 1, 10, config.DEFAULT_DRONE_COUNT)
    battery = st.slider("Battery Range (km)", 10.0, 200.0, float(config.DEFAULT_BATTERY_RANGE_KM), 5.0)
    payload = st.slider("Payload (units)", 20, 300, config.DEFAULT_PAYLOAD_CAPACITY, 10)

playback = get_playback(preset_key, num_zones, int(seed), num_drones, battery, payload)
frames = playback["frames"]

static_layers = [
    route_layer(playback["routes"]),
    zone_layer(playback["zones"]),
    base_layer(playback["center"]),
]

if frames:
    idx = st.slider("Frame", 0, len(frames) - 1, 0, help="Scrub through the flight")
    current = frames[idx]
    layers = static_layers + [drone_layer(current, playback["colors"])]
    flying = ", ".join(f"Drone {d}" for d in current["in_flight"]) or "—"
    st.markdown(f"**Frame:** {idx} / {len(frames) - 1} · **In flight:** {flying}")
else:
    st.warning("No drone has a route to fly for this scenario.")
    layers = static_layers

view_state = pdk.ViewState(
    latitude=playback["center"][0],
    longitude=playback["center"][1],
    zoom=max(playback["zoom"], 9),
)
st.pydeck_chart(pdk.Deck(layers=layers, initial_view_state=view_state, tooltip={"text": "{label}"}))

st.markdown("---")
st.markdown("#### Drone Routes")
st.dataframe(
    [
        {
            "drone": d["id"],
            "route": d["route"],
            "distance (km)": round(d["distance"], 2),
            "battery (%)": round(d["battery"], 1),
        }
        for d in playback["drones"]
    ],
    use_container_width=True,
    hide_index=True,
)

st.markdown("#### Summary")
st.dataframe(
    [{"metric": k, "value": str(v)} for k, v in playback["summary"].items()],
    use_container_width=True,
    hide_index=True,
)
