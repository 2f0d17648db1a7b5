"""Static site: a small marketing site served by perch.

Serves a four-page site from ./public with its shared assets and
stylesheets exposed under /assets and /styles:

- ``/`` and ``/index`` plus the three section pages are logical routes
- ``/assets/...`` and ``/styles/...`` are static mounts
- anything else gets ``public/pages/404.html``

Run:
    python app.py
"""

from pathlib import Path

from perch import App, ServerConfig

PUBLIC_DIR = Path(__file__).parent / "public"

config = ServerConfig(
    port=8090,
    content_dirs=(
        str(PUBLIC_DIR),
        str(PUBLIC_DIR / "assets"),
        str(PUBLIC_DIR / "styles"),
    ),
)

app = App(config)


if __name__ == "__main__":
    app.run()
