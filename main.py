"""
Huvudapplikation för Streamlit löparruttplanerare
"""

import streamlit as st
from streamlit_folium import st_folium

# Importera moduler
from config import (
    CACHE_TTL,
    DEFAULT_CENTER,
    DEFAULT_DISTANCE,
    DEFAULT_PACE,
    DISTANCE_STEP,
    MAX_DISTANCE,
    MIN_DISTANCE
)
from exceptions import RouteCancelled, RoutingError
from geo import calculate_bearing, get_compass_direction
from geocoding import search_location
from log_config import configure
from map_utils import create_map, elevation_profile
from models import GeoPoint, RouteRequest, RouteType, Terrain
from routing import generate_route, reroute_waypoint, run_sync
from utils import create_gpx, format_distance, format_time, get_route_statistics, gpx_filename

ROUTE_TYPE_LABELS = {
    RouteType.LOOP.value: "Loop",
    RouteType.OUT_AND_BACK.value: "Fram och tillbaka",
    RouteType.POINT_TO_POINT.value: "Punkt till punkt"
}

TERRAIN_LABELS = {
    Terrain.ROADS.value: "Vägar",
    Terrain.MIXED.value: "Blandat",
    Terrain.TRAILS.value: "Stigar"
}

cached_search = st.cache_data(ttl=CACHE_TTL, show_spinner=False)(search_location)

USAGE_TEXT = """
**1. Välj startpunkt.** Klicka på kartan eller sök efter en plats i sidopanelen.
I läget punkt till punkt sätter nästa klick målet.

**2. Välj ruttläge.**
- *Loop*: en runda som slutar där den började
- *Fram och tillbaka*: ut till en vändpunkt och nästan samma väg hem
- *Punkt till punkt*: från start till ett valt mål

**3. Välj underlag.** *Vägar* ger kortaste vägen på gator och trottoarer,
*Blandat* är standard och *Stigar* föredrar parker och gångstigar.

**4. Välj distans.** Skjutreglaget anger ungefärlig längd, 1 till 30 km.

**5. Generera rutt.** Tryck på *Generera rutt*. *Ny variant* ger en rutt åt
ett annat håll. Välj *Flytta via-punkt* och klicka på kartan för att ändra
rutten.

**6. Exportera.** *Ladda ner GPX* sparar rutten, som sedan kan importeras i
t.ex. Strava eller Garmin Connect.

En gratis API-nyckel finns på openrouteservice.org.
"""



def init_session_state():
    """Initiera session state"""
    defaults = {
        "start": None,
        "destination": None,
        "waypoints": [],
        "route_result": None,
        "route_error": None,
        "route_generation": 0,
        "selected_waypoint": None,
        "last_click": None
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def clear_route():
    """Töm via-punkter och rutt"""
    st.session_state.waypoints = []
    st.session_state.route_result = None
    st.session_state.route_error = None
    st.session_state.selected_waypoint = None


def clear_all():
    st.session_state.start = None
    st.session_state.destination = None
    clear_route()


def on_route_type_change():
    st.session_state.destination = None
    clear_route()


def waypoint_label(waypoints, index: int) -> str:
    """Via-punktens nummer och riktning från starten"""
    if index == 0:
        return "1 (start)"
    bearing = calculate_bearing(waypoints[0], waypoints[index])
    return f"{index + 1} ({get_compass_direction(bearing)})"


def set_point(point: GeoPoint, route_type: str):
    """Sätt start eller mål från en kartklick eller ett sökresultat"""
    if (route_type == RouteType.POINT_TO_POINT.value
            and st.session_state.start is not None
            and st.session_state.destination is None):
        st.session_state.destination = point
    else:
        st.session_state.start = point
        st.session_state.destination = None
    clear_route()


def next_generation() -> int:
    """Ny generation; äldre pågående beräkningar räknas som inaktuella"""
    st.session_state.route_generation += 1
    return st.session_state.route_generation


def run_generate(api_key: str, route_type: str, terrain: str, distance: int):
    """Generera ny rutt. Vid fel töms rutten."""
    generation = next_generation()
    request = RouteRequest(
        start=st.session_state.start,
        destination=st.session_state.destination,
        target_distance=distance,
        route_type=RouteType(route_type),
        terrain=Terrain(terrain)
    )

    try:
        result = run_sync(generate_route(
            request,
            api_key,
            # Streamlit avbryter själv en inaktuell körning, så inom en körning blir detta aldrig sant
            is_cancelled=lambda: st.session_state.route_generation != generation
        ))
    except RouteCancelled:
        return
    except RoutingError as e:
        clear_route()
        st.session_state.route_error = str(e)
        return

    st.session_state.waypoints = result.waypoints
    st.session_state.route_result = result
    st.session_state.route_error = None


def run_reroute(api_key: str, terrain: str, index: int, position: GeoPoint):
    """Flytta via-punkt. Vid fel behålls den tidigare rutten."""
    generation = next_generation()

    try:
        result = run_sync(reroute_waypoint(
            st.session_state.waypoints,
            index,
            position,
            api_key,
            Terrain(terrain),
            # Streamlit avbryter själv en inaktuell körning, så inom en körning blir detta aldrig sant
            is_cancelled=lambda: st.session_state.route_generation != generation
        ))
    except RouteCancelled:
        return
    except RoutingError as e:
        st.session_state.route_error = str(e)
        return

    st.session_state.waypoints = result.waypoints
    st.session_state.route_result = result
    st.session_state.route_error = None
    if index == 0 and st.session_state.start is not None:
        st.session_state.start = position


def main():
    """Huvudfunktion för Streamlit-appen"""
    st.set_page_config(
        page_title="Löparruttplanerare",
        page_icon="🏃",
        layout="wide"
    )

    init_session_state()

    st.title("Löparruttplanerare")
    st.markdown("Skapa en löp- eller promenadrunda med ungefärlig distans och GPX-export")

    with st.expander("Så använder du appen"):
        st.markdown(USAGE_TEXT)

    # Sidebar för inställningar
    with st.sidebar:
        st.header("Inställningar")

        # API-nyckeln hålls i UI-lagret och skickas med i varje anrop
        api_key = st.secrets["ORS_API_KEY"] if "ORS_API_KEY" in st.secrets else ""
        if not api_key:
            api_key = st.text_input(
                "OpenRouteService API-nyckel",
                type="password",
                key="api_key",
                help="Skaffa en gratis nyckel på openrouteservice.org"
            )

        # Lägesval
        route_type = st.radio(
            "Ruttläge",
            list(ROUTE_TYPE_LABELS),
            format_func=lambda x: ROUTE_TYPE_LABELS[x],
            key="route_type",
            on_change=on_route_type_change
        )

        # Underlag
        terrain = st.radio(
            "Underlag",
            list(TERRAIN_LABELS),
            index=1,
            format_func=lambda x: TERRAIN_LABELS[x],
            key="terrain",
            horizontal=True
        )

        # Distans
        distance = DEFAULT_DISTANCE
        if route_type != RouteType.POINT_TO_POINT.value:
            distance = st.slider(
                "Distans (m)",
                min_value=MIN_DISTANCE,
                max_value=MAX_DISTANCE,
                value=DEFAULT_DISTANCE,
                step=DISTANCE_STEP,
                key="distance"
            )
            st.caption(f"Måldistans: {format_distance(distance)}")

        pace = st.text_input("Tempo (min/km)", value=DEFAULT_PACE, key="pace")

        st.divider()

        # Platssökning
        st.subheader("Sök plats")
        query = st.text_input(
            "Plats eller adress",
            placeholder="T.ex. Kungsgatan 1, Stockholm",
            key="search_query"
        )
        if query and api_key:
            try:
                places = cached_search(query, api_key)
            except RoutingError as e:
                places = []
                st.error(str(e))
            if places:
                choice = st.selectbox(
                    "Träffar",
                    range(len(places)),
                    format_func=lambda i: places[i].name,
                    key="search_choice"
                )
                if st.button("Använd plats", use_container_width=True):
                    set_point(places[choice].point, route_type)
            else:
                st.caption("Inga träffar")

        st.divider()

        # Kartklick
        click_modes = ["point"]
        if st.session_state.waypoints:
            click_modes.append("waypoint")
        click_mode = st.radio(
            "Klick på kartan",
            click_modes,
            format_func=lambda x: "Sätt start/mål" if x == "point" else "Flytta via-punkt",
            key="click_mode"
        )

        if click_mode == "waypoint":
            waypoints = st.session_state.waypoints
            closed = len(waypoints) > 2 and waypoints[0] == waypoints[-1]
            count = len(waypoints) - 1 if closed else len(waypoints)
            st.session_state.selected_waypoint = st.selectbox(
                "Via-punkt",
                range(count),
                format_func=lambda i: waypoint_label(waypoints, i),
                key="waypoint_choice"
            )
        else:
            st.session_state.selected_waypoint = None

        # Status
        if st.session_state.start:
            st.success("Startpunkt vald")
        else:
            st.info("Klicka på kartan eller sök för att välja startpunkt")
        if route_type == RouteType.POINT_TO_POINT.value:
            if st.session_state.destination:
                st.success("Slutpunkt vald")
            elif st.session_state.start:
                st.info("Klicka på kartan eller sök för att välja slutpunkt")

        # Generera rutt
        can_generate = st.session_state.start is not None and bool(api_key) and (
            route_type != RouteType.POINT_TO_POINT.value or st.session_state.destination is not None
        )
        col_gen1, col_gen2 = st.columns(2)
        with col_gen1:
            generate_button = st.button("Generera rutt", type="primary", use_container_width=True,
                                        disabled=not can_generate)
        with col_gen2:
            shuffle_button = st.button("Ny variant", type="secondary", use_container_width=True,
                                       disabled=(not can_generate
                                                 or st.session_state.route_result is None
                                                 or route_type == RouteType.POINT_TO_POINT.value),
                                       help="Generera en rutt åt ett annat håll med samma inställningar")

        if generate_button or shuffle_button:
            with st.spinner("Beräknar rutt..."):
                run_generate(api_key, route_type, terrain, distance)

        if st.button("Rensa", use_container_width=True):
            clear_all()

        if st.session_state.route_error:
            st.error(st.session_state.route_error)

    # Huvudinnehåll
    col1, col2 = st.columns([2, 1])

    with col1:
        st.subheader("Karta")

        # Skapa karta
        start = st.session_state.start
        center = [start.lat, start.lng] if start else DEFAULT_CENTER
        result = st.session_state.route_result

        m = create_map(
            center,
            st.session_state.waypoints,
            result.route if result else [],
            start,
            st.session_state.destination if route_type == RouteType.POINT_TO_POINT.value else None,
            st.session_state.selected_waypoint
        )

        # Visa karta
        map_state = st_folium(
            m,
            key="map",
            width=None,
            height=500,
            returned_objects=["last_clicked"]
        )

        clicked = (map_state or {}).get("last_clicked")
        if clicked and clicked != st.session_state.last_click:
            st.session_state.last_click = clicked
            position = GeoPoint(clicked["lat"], clicked["lng"])
            if st.session_state.selected_waypoint is not None:
                with st.spinner("Beräknar om rutten..."):
                    run_reroute(api_key, terrain, st.session_state.selected_waypoint, position)
            else:
                set_point(position, route_type)
            st.rerun()

    with col2:
        st.subheader("Sammanfattning")

        if result:
            stats = get_route_statistics(result, pace)

            # Visa statistik
            st.metric("Distans", format_distance(stats.distance))
            st.metric("Höjdökning", f"+{stats.elevation_gain:.0f} m / -{stats.elevation_loss:.0f} m")
            st.metric("Uppskattad tid", format_time(stats.estimated_time.total_seconds() / 60))

            # Höjdprofil
            if result.elevation:
                st.caption("Höjdprofil")
                st.area_chart(
                    elevation_profile(result.elevation),
                    x="Distans (km)",
                    y="Höjd (m)",
                    height=180
                )

            st.divider()

            # GPX-export
            st.subheader("Export")
            file_name = gpx_filename(route_type, result.route)
            st.download_button(
                label="Ladda ner GPX",
                data=create_gpx(result.route, result.elevation, file_name[:-len(".gpx")]),
                file_name=file_name,
                mime="application/gpx+xml",
                use_container_width=True
            )
        else:
            st.info("Generera en rutt för att se sammanfattning")

    # Footer
    st.divider()
    st.markdown(
        """
        <div style='text-align: center; color: gray; font-size: 0.8em;'>
        Skapad för löpare |
        Använder OpenRouteService & OpenStreetMap
        </div>
        """,
        unsafe_allow_html=True
    )


if __name__ == "__main__":
    configure()
    main()
