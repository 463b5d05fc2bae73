"""Header/footer composition for the static HTML pages.

The base document and both fragments are read from disk on every call so
that edited partials show up without a restart.
"""

import re
from pathlib import Path
from typing import Optional

HEADER_MARKER = re.compile(r"<div\s+id=[\"']appHeader[\"'][^>]*>\s*</div>", re.IGNORECASE)
FOOTER_MARKER = re.compile(r"<div\s+id=[\"']appFooter[\"'][^>]*>\s*</div>", re.IGNORECASE)
FIRST_SECTION = re.compile(r"<section\b", re.IGNORECASE)
BODY_END = re.compile(r"</body>", re.IGNORECASE)


def _read_fragment(path: Path) -> str:
    if not path.is_file():
        return ""
    return path.read_text(encoding="utf-8")


def _splice(html: str, fragment: str, marker: re.Pattern, anchor: re.Pattern) -> str:
    if not fragment:
        return html
    # Callables keep backslashes in the fragment from being read as group refs.
    if marker.search(html):
        return marker.sub(lambda _: fragment, html, count=1)
    return anchor.sub(lambda match: fragment + match.group(0), html, count=1)


def compose(html: str, header: str = "", footer: str = "") -> str:
    html = _splice(html, header, HEADER_MARKER, FIRST_SECTION)
    html = _splice(html, footer, FOOTER_MARKER, BODY_END)
    return html


class PageComposer:
    def __init__(self, public_dir: Path):
        self.public_dir = Path(public_dir)

    @property
    def index_path(self) -> Path:
        return self.public_dir / "index.html"

    @property
    def header_path(self) -> Path:
        return self.public_dir / "partials" / "header.html"

    @property
    def footer_path(self) -> Path:
        return self.public_dir / "partials" / "footer.html"

    def render(self, base_path: Optional[Path] = None) -> str:
        html = Path(base_path or self.index_path).read_text(encoding="utf-8")
        return compose(html, _read_fragment(self.header_path), _read_fragment(self.footer_path))

    def diagnostics(self) -> dict:
        return {
            "indexPath": str(self.index_path),
            "headerPath": str(self.header_path),
            "footerPath": str(self.footer_path),
            "exists": {
                "index": self.index_path.exists(),
                "header": self.header_path.exists(),
                "footer": self.footer_path.exists(),
            },
        }
