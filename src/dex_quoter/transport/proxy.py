"""URL rewriting for the CORS relay proxy."""


def apply_proxy_prefix(url: str, prefix: str | None) -> str:
    """
    Prepend the proxy prefix to a URL unless it already carries it.

    Parameters
    ----------
    url : str
        Provider URL
    prefix : str | None
        Relay prefix (e.g., 'https://proxy.example/'), no-op when empty

    Returns
    -------
    str
        Rewritten URL

    Examples
    --------
    >>> apply_proxy_prefix("https://api.example/x", "https://proxy.example/")
    'https://proxy.example/https://api.example/x'

    """
    if not prefix or url.startswith(prefix):
        return url
    return f"{prefix}{url}"
