"""Site configuration for Quill.

Configuration is read once at start-up from ``quill.yaml`` in the site root
and handed to the application and server as an explicit ``SiteConfig``
object. Nothing else in the package reads configuration from globals.

Key objects:
- SiteConfig: Frozen dataclass with every setting and resolved directories.
- load_config: Reads quill.yaml over DEFAULT_CONFIG.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "quill.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "title": "Quill",
    "description": "",
    "author": "",
    "url": "http://localhost:4000",
    "language": "en",
    "posts_dir": "blog",
    "templates_dir": "templates",
    "styles_dir": "styles",
    "public_dir": "public",
    "post_url_root": "/blog",
    "host": "127.0.0.1",
    "port": 4000,
    "ws_port": None,
    "recent_posts": 5,
    "strict_dates": False,
}


@dataclass(frozen=True)
class SiteConfig:
    """Settings for one site.

    Attributes:
        root: Site root directory; relative directories resolve against it.
        title: Site and feed title.
        description: Feed description.
        author: Author name made available to templates.
        url: Absolute site URL used for feed links.
        language: Feed language code.
        posts_dir: Directory holding ``*.markdown`` post sources.
        templates_dir: Directory holding Jinja templates.
        styles_dir: Directory holding ``.less`` / ``.css`` stylesheet sources.
        public_dir: Directory of static files served as is.
        post_url_root: URL prefix for post links.
        host: Interface the HTTP server binds to.
        port: HTTP port.
        ws_port: Websocket port for live reload.
        recent_posts: Number of posts shown on the home page.
        strict_dates: Whether a malformed ``Date:`` line fails the request.
    """

    root: Path
    title: str = "Quill"
    description: str = ""
    author: str = ""
    url: str = "http://localhost:4000"
    language: str = "en"
    posts_dir: Path = Path("blog")
    templates_dir: Path = Path("templates")
    styles_dir: Path = Path("styles")
    public_dir: Path = Path("public")
    post_url_root: str = "/blog"
    host: str = "127.0.0.1"
    port: int = 4000
    ws_port: int = 4001
    recent_posts: int = 5
    strict_dates: bool = False

    @classmethod
    def from_mapping(cls, root: Path, values: dict[str, Any]) -> SiteConfig:
        """Build a config from a mapping of raw settings.

        Unknown keys are ignored. Directory settings are resolved against
        ``root`` and the websocket port defaults to the HTTP port plus one.

        Args:
            root: Site root directory.
            values: Raw settings, usually DEFAULT_CONFIG updated from YAML.

        Returns:
            SiteConfig instance.

        Raises:
            ValueError: If ``post_url_root`` is ``/``.
        """
        root = Path(root).resolve()
        known = {f.name for f in fields(cls)} - {"root"}
        settings = {k: v for k, v in values.items() if k in known}

        for key in ("posts_dir", "templates_dir", "styles_dir", "public_dir"):
            if key in settings:
                settings[key] = root / str(settings[key])
            else:
                settings[key] = root / getattr(cls, key)

        port = int(settings.get("port") or DEFAULT_CONFIG["port"])
        settings["port"] = port
        ws_port = settings.get("ws_port")
        settings["ws_port"] = int(ws_port) if ws_port else port + 1
        settings["recent_posts"] = int(
            settings.get("recent_posts", DEFAULT_CONFIG["recent_posts"])
        )
        settings["strict_dates"] = bool(settings.get("strict_dates", False))
        settings["post_url_root"] = "/" + str(
            settings.get("post_url_root", DEFAULT_CONFIG["post_url_root"])
        ).strip("/")
        if settings["post_url_root"] == "/":
            raise ValueError("post_url_root must name a path below the site root, e.g. /blog")
        settings["url"] = str(settings.get("url", DEFAULT_CONFIG["url"])).rstrip("/")
        return cls(root=root, **settings)

    def as_dict(self) -> dict[str, Any]:
        """Return the settings templates may see."""
        return {
            "title": self.title,
            "description": self.description,
            "author": self.author,
            "url": self.url,
            "language": self.language,
            "post_url_root": self.post_url_root,
        }


def load_config(project_root: Path) -> SiteConfig:
    """Load site configuration from quill.yaml.

    Args:
        project_root: Root directory of the site.

    Returns:
        SiteConfig with defaults applied for anything the file leaves out.
    """
    config_path = Path(project_root) / CONFIG_FILENAME
    values = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                values.update(loaded)
    return SiteConfig.from_mapping(project_root, values)
