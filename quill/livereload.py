"""Live reload for ``quill serve --live-reload``.

Watches the site's posts, templates, styles and public files. Once a burst of
changes settles, connected browsers are told over a websocket what to do:
refetch their stylesheets when only style sources changed, otherwise reload
the page.

Key classes:
- LiveReload: Script injection, debounced change tracking and the websocket hub.
- _ChangeHandler: watchdog handler that forwards file changes to LiveReload.
"""

from __future__ import annotations

import asyncio
import json
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import websockets
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .config import SiteConfig
from .html_utils import inject_before_body_end

RELOAD_SCRIPT_TEMPLATE = """
<script>
(() => {{
  const ws = new WebSocket('ws://' + location.hostname + ':{ws_port}');
  ws.onmessage = (event) => {{
    const data = JSON.parse(event.data || '{{}}');
    if (data.type === 'css') {{
      document.querySelectorAll('link[rel="stylesheet"][href^="/css/"]').forEach((link) => {{
        link.href = link.href.split('?')[0] + '?v=' + Date.now();
      }});
    }} else if (data.type === 'reload') {{
      location.reload();
    }}
  }};
}})();
</script>
"""

# Events that mean a file's content or presence changed; the server's own
# reads show up as "opened" / "closed_no_write" and must not trigger reloads.
CHANGE_EVENTS = frozenset({"created", "modified", "deleted", "moved"})


class LiveReload:
    """Tells connected browsers to refresh when site files change.

    Attributes:
        config: Site configuration.
        host: Interface the websocket server binds to.
        ws_port: Websocket port.
        debounce_seconds: Quiet period after the last change before
            browsers are notified.
        script: Script added to every HTML page.
        clients: Connected websocket clients.
    """

    def __init__(self, config: SiteConfig, host: str, ws_port: int, debounce_seconds: float = 0.2):
        self.config = config
        self.host = host
        self.ws_port = ws_port
        self.debounce_seconds = debounce_seconds
        self.script = RELOAD_SCRIPT_TEMPLATE.format(ws_port=ws_port)
        self.clients: set = set()
        self._pending: set[Path] = set()
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stopping: asyncio.Event | None = None
        self._observer: Observer | None = None

    def watched_dirs(self) -> list[Path]:
        """Return the existing site directories whose changes matter."""
        candidates = [
            self.config.posts_dir,
            self.config.templates_dir,
            self.config.styles_dir,
            self.config.public_dir,
        ]
        return [path for path in candidates if path.is_dir()]

    def inject(self, response):
        """Flask ``after_request`` hook adding the reload script to HTML pages."""
        if response.mimetype != "text/html" or response.direct_passthrough:
            return response
        response.set_data(inject_before_body_end(response.get_data(as_text=True), self.script))
        response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
        return response

    @staticmethod
    def is_site_change(path: Path) -> bool:
        """Return False for editor swap and backup files and installed packages."""
        if path.name.startswith((".", "#")) or path.name.endswith("~"):
            return False
        return "node_modules" not in path.parts

    def changed(self, path: Path) -> None:
        """Record a changed file and restart the debounce timer.

        Args:
            path: File that changed.
        """
        if not self.is_site_change(path):
            return
        with self._lock:
            self._pending.add(path)
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce_seconds, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Notify browsers about every change recorded since the last flush."""
        with self._lock:
            paths, self._pending = self._pending, set()
            self._timer = None
        if not paths:
            return
        message = self.message_for(paths)
        names = ", ".join(sorted(path.name for path in paths))
        print(f"Changed: {names}; sending {message['type']} to {len(self.clients)} browser(s)")
        self.broadcast(message)

    def message_for(self, paths: Iterable[Path]) -> dict[str, Any]:
        """Choose the browser action for a set of changed files.

        Args:
            paths: Changed files.

        Returns:
            ``{"type": "css"}`` when every file is a style source, else
            ``{"type": "reload"}``.
        """
        styles_dir = self.config.styles_dir
        if all(styles_dir in path.parents for path in paths):
            return {"type": "css"}
        return {"type": "reload"}

    def broadcast(self, message: dict[str, Any]) -> None:
        """Send a message to every connected browser.

        Safe to call from any thread; does nothing before the websocket
        server has started.
        """
        if self._loop is None:
            return
        self._loop.call_soon_threadsafe(self._send, json.dumps(message))

    def _send(self, payload: str) -> None:
        websockets.broadcast(set(self.clients), payload)

    async def _handler(self, connection) -> None:
        self.clients.add(connection)
        try:
            await connection.wait_closed()
        finally:
            self.clients.discard(connection)

    def start(self) -> None:  # pragma: no cover - integration path
        """Start the websocket server thread and the file watcher."""
        threading.Thread(target=self._run, daemon=True).start()
        handler = _ChangeHandler(self)
        observer = Observer()
        for watch_path in self.watched_dirs():
            observer.schedule(handler, str(watch_path), recursive=True)
        observer.start()
        self._observer = observer

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        if self._loop is not None and self._stopping is not None:
            self._loop.call_soon_threadsafe(self._stopping.set)

    def _run(self) -> None:  # pragma: no cover - integration path
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(self._serve(loop))
        except OSError as exc:
            print(f"Live reload websocket failed to start (port {self.ws_port}): {exc}")
        finally:
            self._loop = None
            loop.close()

    async def _serve(self, loop: asyncio.AbstractEventLoop) -> None:  # pragma: no cover
        self._stopping = asyncio.Event()
        async with websockets.serve(self._handler, self.host, self.ws_port):
            self._loop = loop
            await self._stopping.wait()


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, live_reload: LiveReload):
        super().__init__()
        self.live_reload = live_reload

    def on_any_event(self, event):
        if event.is_directory or event.event_type not in CHANGE_EVENTS:
            return
        self.live_reload.changed(Path(event.src_path))
        dest_path = getattr(event, "dest_path", "")
        if dest_path:
            self.live_reload.changed(Path(dest_path))
