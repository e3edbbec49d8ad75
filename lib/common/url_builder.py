"""Short URL construction."""


def build_short_url(short_code: str, base_url: str, path_prefix: str = "") -> str:
    """Join the configured base URL, optional path prefix and short code.

    Args:
        short_code: The short code
        base_url: Public base URL of the service (e.g., https://sho.rt)
        path_prefix: Optional path prefix (e.g., /s)

    Returns:
        Shareable short URL, e.g. https://sho.rt/s/abc123
    """
    parts = [base_url.rstrip("/")]
    prefix = path_prefix.strip("/")
    if prefix:
        parts.append(prefix)
    parts.append(short_code)
    return "/".join(parts)
