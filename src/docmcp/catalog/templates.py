"""URI template matching by literal prefix/suffix decomposition."""

from __future__ import annotations

import re

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def split_template(template: str) -> tuple[str, str, str]:
    """Split *template* into ``(prefix, placeholder, suffix)``.

    Raises:
        ValueError: If the template does not contain exactly one placeholder.
    """
    matches = list(_PLACEHOLDER.finditer(template))
    if len(matches) != 1:
        msg = f"template must contain exactly one placeholder: {template!r}"
        raise ValueError(msg)
    match = matches[0]
    return template[: match.start()], match.group(1), template[match.end() :]


def match_template(template: str, uri: str) -> str | None:
    """Return the segment of *uri* captured by the template placeholder.

    ``match_template("mcp://tools/{toolName}/docs", "mcp://tools/x/docs")``
    returns ``"x"``.  Returns ``None`` when the literal prefix or suffix do
    not match or the captured segment would be empty.
    """
    prefix, _, suffix = split_template(template)
    if not uri.startswith(prefix) or not uri.endswith(suffix):
        return None
    end = len(uri) - len(suffix)
    if end <= len(prefix):
        return None
    return uri[len(prefix) : end]
