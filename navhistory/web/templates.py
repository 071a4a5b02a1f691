from __future__ import annotations

import html
from functools import lru_cache
from pathlib import Path
from string import Template

PAGE_TEMPLATE = Path(__file__).with_name("static") / "base.html"


@lru_cache(maxsize=1)
def _page_template() -> Template:
    return Template(PAGE_TEMPLATE.read_text(encoding="utf-8"))


def render_page(*, ws_path: str = "/ws", title: str = "navhistory") -> str:
    """The client page, wired to the bridge socket at ``ws_path``."""
    return _page_template().substitute(ws_path=ws_path, title=html.escape(title))
