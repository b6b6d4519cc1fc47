"""FastAPI application for the departure board web interface.

Provides the REST API, the stop search page and the dot-matrix board page.
"""

import html
import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse

from ..board.poller import BoardPoller
from ..core.config import Config, get_config
from ..core.errors import BoardError
from ..display.graphics import Palette
from ..transit import create_client
from ..transit.departures import normalize_stop_id, strip_stop_prefix
from ..transit.stops import StopDirectory
from .routes import api_router, stops_router, transit_router
from .schemas import ErrorResponse

logger = logging.getLogger(__name__)


def create_app(
    config: Config | None = None,
    client=None,
    stops: StopDirectory | None = None,
    poller: BoardPoller | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Configuration (defaults to the global config)
        client: Transit client; built from config when omitted
        stops: Stop directory; built from config when omitted
        poller: Board poller; when omitted the app creates one and runs it
            for the lifetime of the server

    Returns:
        Configured FastAPI app
    """
    config = config or get_config()
    owns_poller = poller is None
    if stops is None:
        stops = StopDirectory(config.board.stops_file)
    stops.load()
    if poller is None:
        poller = BoardPoller(
            interval=config.board.poll_interval,
            max_boards=config.board.max_boards,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if owns_poller:
            poller.start()
        try:
            yield
        finally:
            if owns_poller:
                poller.stop()

    app = FastAPI(
        title="BKK Departure Board",
        description="Dot-matrix departure board for BKK FUTÁR",
        version="1.0.0",
        docs_url="/api/docs" if config.web.enable_docs else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.client = client or create_client(config.transit)
    app.state.mock = config.transit.use_mock if client is None else False
    app.state.stops = stops
    app.state.poller = poller
    app.state.board_settings = config.board

    @app.exception_handler(BoardError)
    async def board_error_handler(request: Request, exc: BoardError) -> JSONResponse:
        status = exc.http_status
        if status >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        body = ErrorResponse(error=type(exc).__name__, detail=exc.message, details=exc.details)
        return JSONResponse(status_code=status, content=body.model_dump())

    app.include_router(api_router)
    app.include_router(stops_router)
    app.include_router(transit_router)

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        """Stop search page."""
        return _index_page()

    @app.get("/board/{stop_id}", response_class=HTMLResponse)
    async def board_page(request: Request, stop_id: str) -> HTMLResponse:
        """Full-screen dot-matrix board for one stop."""
        full_stop_id = normalize_stop_id(stop_id)
        name = request.app.state.stops.get_stop_name(full_stop_id)
        return _board_page(full_stop_id, name, request.app.state.board_settings)

    return app


def _index_page() -> HTMLResponse:
    """Search page: type a stop name or use the current location."""
    return HTMLResponse("""
    <!DOCTYPE html>
    <html lang="hu">
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1">
        <title>BKK Indulások</title>
        <style>
            body {
                font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
                background: #0a0a0a;
                color: #ffb000;
                margin: 0;
                padding: 20px;
            }
            .container { max-width: 600px; margin: 0 auto; }
            input {
                width: 100%;
                padding: 12px;
                font-size: 18px;
                background: #1a1400;
                color: #ffb000;
                border: 1px solid #ffb000;
                border-radius: 6px;
                box-sizing: border-box;
            }
            button {
                margin-top: 10px;
                padding: 10px 18px;
                background: #ffb000;
                color: #0a0a0a;
                border: none;
                border-radius: 6px;
                cursor: pointer;
            }
            ul { list-style: none; padding: 0; }
            li a {
                display: block;
                padding: 10px;
                color: #ffb000;
                text-decoration: none;
                border-bottom: 1px solid #2a1e00;
            }
            li small { opacity: 0.6; margin-left: 8px; }
        </style>
    </head>
    <body>
        <div class="container">
            <h1>BKK Indulások</h1>
            <input id="q" placeholder="Megálló neve..." autocomplete="off">
            <button onclick="nearby()">Közeli megállók</button>
            <ul id="results"></ul>
        </div>
        <script>
            const results = document.getElementById('results');

            function show(stops) {
                results.innerHTML = '';
                for (const s of stops) {
                    const li = document.createElement('li');
                    const a = document.createElement('a');
                    a.href = '/board/' + encodeURIComponent(s.stop_id);
                    a.textContent = s.name;
                    const small = document.createElement('small');
                    small.textContent = s.distance_m !== undefined
                        ? `${Math.round(s.distance_m)} m` : s.stop_id;
                    a.appendChild(small);
                    li.appendChild(a);
                    results.appendChild(li);
                }
            }

            let timer = null;
            document.getElementById('q').addEventListener('input', (e) => {
                clearTimeout(timer);
                timer = setTimeout(async () => {
                    const q = e.target.value.trim();
                    if (!q) { show([]); return; }
                    const resp = await fetch('/api/stops?q=' + encodeURIComponent(q));
                    show((await resp.json()).stops);
                }, 200);
            });

            function nearby() {
                navigator.geolocation.getCurrentPosition(async (pos) => {
                    const {latitude, longitude} = pos.coords;
                    const resp = await fetch(`/api/stops/nearby?lat=${latitude}&lon=${longitude}&limit=10`);
                    show((await resp.json()).stops);
                }, (err) => console.error('Geolocation failed', err));
            }
        </script>
    </body>
    </html>
    """)


def _board_page(stop_id: str, stop_name: str, settings) -> HTMLResponse:
    """Board page; polls /api/board and paints each matrix as a CSS grid."""
    pitch = settings.pixel_pitch
    palette = Palette.from_hex(settings.lit_color, settings.unlit_color)
    page = """
    <!DOCTYPE html>
    <html lang="hu">
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1">
        <title>__NAME__</title>
        <style>
            body { background: #0a0a0a; margin: 0; padding: 20px; }
            h1 { color: #fff; margin: 0 0 10px 0; font-family: sans-serif; }
            h6 { color: #fff; margin: 10px 0 0 0; font-family: monospace; }
            .dotmatrix-line { margin-bottom: 6px; }
            .dotmatrix-grid { display: grid; gap: 0; }
            .dotmatrix-pixel { width: __PITCH__px; height: __PITCH__px; border-radius: 50%; }
            .lit { background: __LIT__; }
            .unlit { background: __UNLIT__; }
            .blinking .lit { animation: blink 1s step-start infinite; }
            @keyframes blink { 50% { background: __UNLIT__; } }
        </style>
    </head>
    <body>
        <h1 id="stop-name">__NAME__</h1>
        <div id="board"></div>
        <h6>__STOP_ID__</h6>
        <script>
            const stopId = __STOP_ID_JSON__;
            const board = document.getElementById('board');

            function paint(line) {
                const wrap = document.createElement('div');
                wrap.className = 'dotmatrix-line';
                const grid = document.createElement('div');
                grid.className = 'dotmatrix-grid' + (line.arriving ? ' blinking' : '');
                const cols = line.matrix[0].length;
                grid.style.gridTemplateColumns = `repeat(${cols}, __PITCH__px)`;
                grid.style.gridTemplateRows = 'repeat(7, __PITCH__px)';
                for (const row of line.matrix) {
                    for (const pixel of row) {
                        const cell = document.createElement('div');
                        cell.className = 'dotmatrix-pixel ' + (pixel ? 'lit' : 'unlit');
                        grid.appendChild(cell);
                    }
                }
                wrap.appendChild(grid);
                return wrap;
            }

            async function refresh() {
                try {
                    const resp = await fetch(`/api/board/${encodeURIComponent(stopId)}?width=${window.innerWidth}`);
                    if (!resp.ok) throw new Error(`HTTP ${resp.status}`);
                    const data = await resp.json();
                    document.getElementById('stop-name').textContent = data.stop_name;
                    board.replaceChildren(...data.lines.map(paint));
                } catch (e) {
                    console.error('Board refresh failed', e);
                }
            }

            refresh();
            setInterval(refresh, __INTERVAL_MS__);
        </script>
    </body>
    </html>
    """
    replacements = {
        "__NAME__": html.escape(stop_name),
        "__STOP_ID_JSON__": json.dumps(strip_stop_prefix(stop_id)),
        "__STOP_ID__": html.escape(stop_id),
        "__PITCH__": str(pitch),
        "__LIT__": palette.lit.to_hex(),
        "__UNLIT__": palette.unlit.to_hex(),
        "__INTERVAL_MS__": str(int(settings.poll_interval * 1000)),
    }
    for key, value in replacements.items():
        page = page.replace(key, value)
    return HTMLResponse(page)

