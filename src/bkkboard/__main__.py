"""BKK departure board entry point.

Usage:
    python -m bkkboard [options]

Options:
    --config PATH     Path to config file (default: config/bkkboard.yaml)
    --text TEXT       Print TEXT as a dot matrix and exit
    --stop ID         Print the board for stop ID once and exit
    --png PATH        With --text or --stop, also save the rendering as PNG
    --width PX        Viewport width used for the board layout
    --serve           Run the web server and the departure poller
    --debug           Enable debug logging
"""

import argparse
import signal
import sys
import threading
from pathlib import Path

from . import __version__
from .core.config import DEFAULT_CONFIG_PATH, Config, ConfigManager
from .core.errors import BoardError
from .core.logging import get_logger, setup_logging

logger = get_logger(__name__)


class BoardSystem:
    """Runs the poller and the web server together.

    Manages their lifecycle and shutdown.
    """

    def __init__(self, config: Config) -> None:
        self._config = config
        self._shutdown_event = threading.Event()
        self._poller = None
        self._web_server = None

    def start(self) -> None:
        """Start poller and web server."""
        from .board import BoardPoller, DepartureBoard
        from .transit import StopDirectory, create_client
        from .web import create_app

        logger.info("Starting BKK departure board")

        client = create_client(self._config.transit)
        stops = StopDirectory(self._config.board.stops_file)
        stops.load()

        self._poller = BoardPoller(
            interval=self._config.board.poll_interval,
            max_boards=self._config.board.max_boards,
        )
        self._poller.add_board(
            DepartureBoard(self._config.board.stop_id, client, stops, self._config.board),
            pinned=True,
        )
        self._poller.start()

        app = create_app(self._config, client=client, stops=stops, poller=self._poller)
        app.state.mock = self._config.transit.use_mock
        self._start_web_server(app)

    def _start_web_server(self, app) -> None:
        """Run uvicorn in a background thread."""
        import asyncio

        import uvicorn

        server_config = uvicorn.Config(
            app,
            host=self._config.web.host,
            port=self._config.web.port,
            log_level="warning",
        )
        self._web_server = uvicorn.Server(server_config)

        def run_server() -> None:
            asyncio.run(self._web_server.serve())

        thread = threading.Thread(target=run_server, name="WebServer", daemon=True)
        thread.start()
        logger.info(
            "Web server started on http://%s:%d",
            self._config.web.host,
            self._config.web.port,
        )

    def stop(self) -> None:
        """Stop all components."""
        logger.info("Stopping BKK departure board")
        if self._web_server:
            self._web_server.should_exit = True
        if self._poller:
            self._poller.stop()
        self._shutdown_event.set()

    def wait_for_shutdown(self) -> None:
        self._shutdown_event.wait()


def _print_text(text: str, png: Path | None, config: Config) -> None:
    from .display import MatrixRenderer, Palette, create_dot_matrix_text, matrix_to_text

    matrix = create_dot_matrix_text(text)
    print(matrix_to_text(matrix))
    if png:
        renderer = MatrixRenderer(
            pitch=config.board.pixel_pitch,
            palette=Palette.from_hex(config.board.lit_color, config.board.unlit_color),
        )
        renderer.render(matrix).save(png)
        logger.info("Saved %s", png)


def _print_board(stop_id: str, width: int | None, png: Path | None, config: Config) -> int:
    from .board import DepartureBoard
    from .display import matrix_to_text
    from .transit import StopDirectory, create_client

    board = DepartureBoard(
        stop_id,
        create_client(config.transit),
        StopDirectory(config.board.stops_file),
        config.board,
    )
    board.update_data()

    print(board.stop_name)
    print()
    for matrix in board.matrices(width):
        print(matrix_to_text(matrix))
        print()

    if png:
        board.render(width).save(png)
        logger.info("Saved %s", png)
    return 1 if board.last_error else 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="bkkboard",
        description="BKK dot-matrix departure board",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to config file")
    parser.add_argument("--text", help="Print TEXT as a dot matrix and exit")
    parser.add_argument("--stop", help="Print the board for a stop once and exit")
    parser.add_argument("--png", type=Path, help="Also save the rendering as PNG")
    parser.add_argument("--width", type=int, help="Viewport width in px for the board layout")
    parser.add_argument("--serve", action="store_true", help="Run web server and poller")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(argv)

    setup_logging(level="DEBUG" if args.debug else "INFO")

    try:
        config = ConfigManager.get_instance(args.config).get()
    except BoardError as e:
        logger.error("%s", e)
        return 2

    setup_logging(
        level="DEBUG" if args.debug else config.logging.level,
        log_format=config.logging.format,
        log_file=config.logging.file,
        max_size_mb=config.logging.max_size_mb,
        backup_count=config.logging.backup_count,
    )

    if args.text is not None:
        _print_text(args.text, args.png, config)
        return 0

    if args.stop:
        try:
            return _print_board(args.stop, args.width, args.png, config)
        except BoardError as e:
            logger.error("%s", e)
            return 1

    if not args.serve:
        parser.print_help()
        return 0

    system = BoardSystem(config)

    def signal_handler(sig, frame):
        logger.info("Received signal %s, shutting down...", sig)
        system.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        system.start()
        system.wait_for_shutdown()
        return 0
    except Exception as e:
        logger.exception("Fatal error: %s", e)
        system.stop()
        return 1


if __name__ == "__main__":
    sys.exit(main())
