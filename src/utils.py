from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def trailingslashit(url: str) -> str:
    """Return ``url`` with exactly one trailing slash."""
    return url.rstrip("/\\") + "/"


def add_query_arg(url: str, **params: str) -> str:
    """Add or replace query parameters on ``url``.

    Existing parameters are kept in order; a parameter with the same name is
    replaced in place. The fragment is preserved.

    Args:
        url: Base URL, may already carry a query string
        **params: Parameters to set

    Returns:
        The URL with the parameters applied
    """
    parts = urlsplit(url)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    query.update(params)
    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment)
    )


def remove_query_arg(url: str, *names: str) -> str:
    """Drop query parameters from ``url``, keeping everything else."""
    parts = urlsplit(url)
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in names
    ]
    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment)
    )


def truncate_value(value: str, max_length: int = 60) -> str:
    """Truncate a value to fit within max_length using first...last format.

    Args:
        value: The value to potentially truncate
        max_length: Maximum allowed length

    Returns:
        Original value if it fits, or truncated value with ... in the middle
    """
    if len(value) <= max_length:
        return value

    # Reserve 3 characters for "..."
    available_chars = max_length - 3
    first_chars = available_chars // 2
    last_chars = available_chars - first_chars

    return f"{value[:first_chars]}...{value[-last_chars:]}"
