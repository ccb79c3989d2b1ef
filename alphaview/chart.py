from __future__ import annotations

import html
import json
from typing import Dict, List

from alphaview.series import ChartSeries, to_epoch
from alphaview.state import ChartMode

# ── Palette — Whomp Dark ─────────────────────────────────────────────────────
BG      = "#0b0f0d"
PANEL   = "#0f1714"
BORDER  = "#1b2a24"
ACCENT  = "#00d084"
UP      = "#00d084"
DOWN    = "#ff5a5f"
TXT     = "#e7f5ef"
DIM     = "#6a7a73"
LINE    = "rgba(75,192,192,1)"
FILL    = "rgba(75,192,192,0.2)"
FONT_PRIMARY = "'Space Grotesk','Inter','Helvetica Neue',sans-serif"
LIGHTWEIGHT_CHARTS_JS = "https://unpkg.com/lightweight-charts@4.1.0/dist/lightweight-charts.standalone.production.js"

TITLES = {ChartMode.LINE: "Line Chart", ChartMode.CANDLESTICK: "Candlestick Chart"}


def line_points(series: ChartSeries) -> List[Dict[str, object]]:
    return [{"time": to_epoch(ts), "value": round(value, 4)} for ts, value in series.line]


def candle_points(series: ChartSeries) -> List[Dict[str, object]]:
    out = []
    for ts, (o, h, l, c) in series.candlestick:
        out.append(
            {
                "time": to_epoch(ts),
                "open": round(o, 4),
                "high": round(h, 4),
                "low": round(l, 4),
                "close": round(c, 4),
            }
        )
    return out


def _series_script(series: ChartSeries, mode: ChartMode) -> str:
    if mode is ChartMode.LINE:
        return f"""
            var series = chart.addAreaSeries({{
                lineColor: '{LINE}',
                topColor: '{FILL}',
                bottomColor: 'rgba(75,192,192,0)',
                lineWidth: 2,
                title: {json.dumps(f"{series.symbol} Price")},
            }});
            series.setData({json.dumps(line_points(series))});
        """
    return f"""
            var series = chart.addCandlestickSeries({{
                upColor: '{UP}',
                downColor: '{DOWN}',
                borderUpColor: '{UP}',
                borderDownColor: '{DOWN}',
                wickUpColor: '{UP}',
                wickDownColor: '{DOWN}',
            }});
            series.setData({json.dumps(candle_points(series))});
        """


def build_chart_html(series: ChartSeries, mode: ChartMode, height: int = 420) -> str:
    """Self-contained page drawing *series* with TradingView lightweight-charts."""
    mode = ChartMode(mode)
    title = html.escape(TITLES[mode])
    chart_height = max(120, height - 60)
    axis_labels = ""
    if mode is ChartMode.LINE:
        axis_labels = """
        <div class="axis axis-y">Price (USD)</div>
        <div class="axis axis-x">Time</div>
        """
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <script src="{LIGHTWEIGHT_CHARTS_JS}"></script>
    <style>
        html,body {{ margin:0; padding:0; background:{BG}; color:{TXT}; font-family:{FONT_PRIMARY}; }}
        h2 {{ margin:8px 0; font-size:1.1rem; text-align:center; letter-spacing:1px; }}
        #chart-container {{ position:relative; width:100%; height:{chart_height}px; }}
        .axis {{ color:{DIM}; font-size:.7rem; text-transform:uppercase; letter-spacing:1px; }}
        .axis-x {{ text-align:center; margin-top:4px; }}
        .axis-y {{ position:absolute; left:4px; top:40px; }}
    </style>
</head>
<body>
    <h2>{title}</h2>
    {axis_labels}
    <div id="chart-container"></div>
    <script>
        var container = document.getElementById('chart-container');
        if (window.LightweightCharts) {{
            var chart = LightweightCharts.createChart(container, {{
                layout: {{
                    background: {{ color: '{BG}' }},
                    textColor: '{DIM}',
                }},
                grid: {{
                    vertLines: {{ color: '#15211c' }},
                    horzLines: {{ color: '#15211c' }},
                }},
                rightPriceScale: {{
                    borderColor: '{BORDER}',
                }},
                timeScale: {{
                    borderColor: '{BORDER}',
                    timeVisible: true,
                }},
                crosshair: {{
                    vertLine: {{ color: '{DIM}', style: 2 }},
                    horzLine: {{ color: '{DIM}', style: 2 }},
                }},
                width: container.clientWidth,
                height: {chart_height},
            }});
            {_series_script(series, mode)}
            chart.timeScale().fitContent();
            window.addEventListener('resize', function() {{
                chart.applyOptions({{ width: container.clientWidth }});
            }});
        }}
    </script>
</body>
</html>"""
