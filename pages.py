"""HTML pages for the WHOOP OAuth flow and data views.

Templates are plain ``str.format`` strings. Any dynamic value goes through
``escape_html`` before it is formatted in.
"""
import json
from typing import Any, Iterable, Tuple


def escape_html(value: Any) -> str:
    """Replace the five HTML-significant characters with entities."""
    text = value if isinstance(value, str) else str(value)
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def pretty_json(data: Any) -> str:
    """Pretty-print ``data`` as JSON, escaped for a <pre> block."""
    return escape_html(json.dumps(data, indent=2))


HOME_PAGE = """
<h2>WHOOP OAuth Starter</h2>
<p><a href="/auth/whoop">Connect WHOOP</a></p>
<p><a href="/dashboard">Dashboard</a> | <a href="/me">Profile</a></p>
"""

NO_TOKEN_PAGE = """
<h2>No token yet</h2>
<p>No WHOOP token yet. <a href="/auth/whoop">Connect WHOOP</a> first.</p>
"""

ERROR_PAGE = """
<h2>{title}</h2>
<pre>{body}</pre>
"""

JSON_PAGE = """<pre>{body}</pre>"""

DASHBOARD_SECTION = """
<h3>{heading}</h3>
<pre>{body}</pre>
"""

DASHBOARD_PAGE = """
<h2>WHOOP Dashboard</h2>
{sections}
<p><a href="/auth/whoop">Reconnect WHOOP</a></p>
"""


def render_error(title: str, detail: Any) -> str:
    return ERROR_PAGE.format(title=escape_html(title), body=pretty_json(detail))


def render_json(data: Any) -> str:
    return JSON_PAGE.format(body=pretty_json(data))


def render_dashboard(sections: Iterable[Tuple[str, Any]]) -> str:
    """Render (heading, data) pairs in the order given."""
    rendered = "".join(
        DASHBOARD_SECTION.format(heading=escape_html(heading), body=pretty_json(data))
        for heading, data in sections
    )
    return DASHBOARD_PAGE.format(sections=rendered)
