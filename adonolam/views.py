"""HTML pages served by the web front end."""

from __future__ import annotations

from dataclasses import dataclass

_HTML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "'": "&#39;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&#34;",
    }
)

INDEX_TITLE = "Adon Olam Tune Generator"

_INDEX_BODY = (
    '<main><form hx-encoding="multipart/form-data" hx-post="/api/upload" '
    'hx-swap="outerHTML"><input type="file" name="uploadFile"> '
    '<label for="trackNo">Track Number</label> '
    '<input type="number" name="trackNo"> <button>Upload</button></form></main>'
)


@dataclass(frozen=True)
class PageInfo:
    """Metadata describing a rendered page."""

    request_uri: str = ""
    title: str = ""
    description: str = ""
    image: str = ""
    image_alt: str = ""


def _escape(text: str) -> str:
    return text.translate(_HTML_ESCAPES)


def base_layout(page_info: PageInfo, content: str) -> str:
    """Wrap already rendered HTML ``content`` in the common page layout."""
    title = _escape(page_info.title)
    description = _escape(page_info.description)
    return (
        '<!doctype html><html><head><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">'
        '<meta name="google" content="notranslate">'
        f"<title>{title}</title>"
        f'<meta property="og:title" content="{title}">'
        f'<meta property="og:description" content="{description}">'
        '<link rel="stylesheet" href="static/styles.css">'
        '<script defer src="/static/scripts.js"></script>'
        '<script defer src="https://unpkg.com/htmx-ext-json-enc@2.0.0/json-enc.js"></script>'
        "<!-- Add other head elements like favicons, canonical links, etc. -->"
        "</head><body>"
        f"{content}"
        "</body></html>"
    )


def index_page() -> str:
    """Render the upload form page."""
    return base_layout(PageInfo(title=INDEX_TITLE), _INDEX_BODY)