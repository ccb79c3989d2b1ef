import html

import streamlit as st
import streamlit.components.v1 as components

from alphaview.chart import ACCENT, BG, BORDER, DIM, FONT_PRIMARY, PANEL, TXT, build_chart_html
from alphaview.client import AlphaVantageClient
from alphaview.config import configure_logging, load_settings
from alphaview.state import ChartMode, View
from alphaview.widget import EffectQueue, StockWidget

st.set_page_config(layout="wide", page_title="AlphaView", initial_sidebar_state="collapsed")

settings = load_settings()
configure_logging(settings.log_level)

PROMPT_TEXT = "Enter a symbol to view charts"
LOADING_TEXT = "Loading..."

# ── State ────────────────────────────────────────────────────────────────────
if "effects" not in st.session_state:
    st.session_state.effects = EffectQueue()
if "widget" not in st.session_state:
    st.session_state.widget = StockWidget(
        AlphaVantageClient.from_settings(settings),
        schedule=st.session_state.effects,
    )
if "search_box" not in st.session_state:
    st.session_state.search_box = ""

widget = st.session_state.widget
effects = st.session_state.effects


def _on_query_change():
    widget.type_query(st.session_state.search_box)


def _on_select(symbol):
    widget.select(symbol)
    st.session_state.search_box = symbol


# ── Streamlit CSS ────────────────────────────────────────────────────────────
st.markdown(f"""<style>
* {{ border-radius:0!important }}
html,body,[data-testid="stAppViewContainer"],[data-testid="stApp"]
  {{background:{BG}!important;color:{TXT};font-family:{FONT_PRIMARY}!important}}
[data-testid="stHeader"],[data-testid="stToolbar"],
[data-testid="stDecoration"],#MainMenu,footer {{display:none!important}}
input{{background:{PANEL}!important;color:{ACCENT}!important;
      border:1px solid {BORDER}!important;font-size:.75rem!important}}
input:focus{{border-color:{ACCENT}!important;box-shadow:none!important}}
[data-testid="stButton"] button{{
  background:transparent!important;color:{TXT}!important;
  border:1px solid {BORDER}!important;font-size:.7rem!important;
  width:100%;justify-content:flex-start}}
[data-testid="stButton"] button:hover{{border-color:{ACCENT}!important;color:{ACCENT}!important}}
.av-title{{text-align:center;font-size:2rem;color:{TXT};letter-spacing:2px;margin-bottom:.5rem}}
.av-message{{display:flex;align-items:center;justify-content:center;height:16rem;
  color:{DIM};font-size:1.2rem;font-weight:600}}
</style>""", unsafe_allow_html=True)


def render_view(slot):
    state = widget.state
    view = widget.view
    if view is View.PROMPT:
        slot.markdown(f'<div class="av-message">{PROMPT_TEXT}</div>', unsafe_allow_html=True)
    elif view is View.LOADING:
        slot.markdown(f'<div class="av-message">{LOADING_TEXT}</div>', unsafe_allow_html=True)
    elif view is View.EMPTY:
        slot.markdown(
            f'<div class="av-message">No intraday data for {html.escape(state.selected)}</div>',
            unsafe_allow_html=True,
        )
    else:
        with slot.container():
            components.html(
                build_chart_html(state.series, state.mode, height=settings.chart_height),
                height=settings.chart_height,
            )


left, _, right = st.columns([20, 2, 78])

with left:
    st.text_input(
        "Symbol",
        key="search_box",
        placeholder="Search for a symbol...",
        on_change=_on_query_change,
        label_visibility="collapsed",
    )
    for i, suggestion in enumerate(widget.state.suggestions):
        st.button(suggestion.label, key=f"suggestion_{i}", on_click=_on_select, args=(suggestion.symbol,))
    st.button("LINE CHART", key="mode_line", on_click=widget.set_mode, args=(ChartMode.LINE,))
    st.button("CANDLESTICK CHART", key="mode_candle", on_click=widget.set_mode, args=(ChartMode.CANDLESTICK,))
    notice_slot = st.empty()

with right:
    st.markdown('<div class="av-title">FINANCE DASHBOARD</div>', unsafe_allow_html=True)
    chart_slot = st.empty()
    render_view(chart_slot)
    if len(effects):
        effects.drain()
        render_view(chart_slot)

if widget.state.notice:
    notice_slot.warning(widget.state.notice)

if settings.debug:
    with st.sidebar:
        st.json({
            "query": widget.state.query,
            "selected": widget.state.selected,
            "loading": widget.state.loading,
            "mode": widget.state.mode.value,
            "generation": widget.state.generation,
            "view": widget.view.value,
            "samples": len(widget.state.series) if widget.state.series else 0,
        })
