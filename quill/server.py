"""Development server for Quill.

Runs the site's Flask app on Flask's own threaded server, one thread per
request. With live reload enabled it also starts the websocket hub and file
watcher from ``quill.livereload`` and adds the reload script to HTML pages.

Key classes:
- SiteServer: Resolves host and ports, builds the app and runs it.
"""

from __future__ import annotations

from .app import create_app
from .config import SiteConfig
from .livereload import LiveReload


class SiteServer:
    """Runs the site, optionally with live reload.

    Attributes:
        config: Site configuration.
        host: Interface to bind.
        http_port: Port for HTTP server.
        ws_port: Port for WebSocket connections.
        live_reload: Live reload helper, or None when disabled.
        app: Flask application.
    """

    def __init__(
        self,
        config: SiteConfig,
        live_reload: bool = False,
        host: str | None = None,
        http_port: int | None = None,
        ws_port: int | None = None,
    ):
        """Initialize the server.

        Args:
            config: Site configuration.
            live_reload: Whether to enable live reload.
            host: Optional override for the bind host.
            http_port: Optional override for HTTP port.
            ws_port: Optional override for the websocket port; defaults to
                the HTTP port plus one when the HTTP port is overridden.
        """
        self.config = config
        self.host = host or config.host
        self.http_port = int(http_port or config.port)
        if ws_port is not None:
            self.ws_port = ws_port
        elif http_port is not None:
            self.ws_port = self.http_port + 1
        else:
            self.ws_port = config.ws_port
        self.live_reload = LiveReload(config, self.host, self.ws_port) if live_reload else None
        self.app = create_app(config, live_reload=self.live_reload)

    def start(self) -> None:  # pragma: no cover - integration path
        if self.live_reload is not None:
            self.live_reload.start()
            print(f"Live reload on ws://{self.host}:{self.ws_port}")
        print(f"Serving {self.config.root} at http://{self.host}:{self.http_port}")
        try:
            self.app.run(host=self.host, port=self.http_port, threaded=True, use_reloader=False)
        finally:
            self.stop()

    def stop(self) -> None:
        if self.live_reload is not None:
            self.live_reload.stop()
