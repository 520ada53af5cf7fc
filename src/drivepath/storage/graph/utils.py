import urllib.parse


def site_path_from_url(url: str) -> str:
    """Return the ``host:/path`` form Graph uses to address a site."""
    # Remove the scheme (http:// or https://)
    if url.startswith("https://"):
        url = url[len("https://") :]
    elif url.startswith("http://"):
        url = url[len("http://") :]

    # Replace the first '/' with ':/' to match the desired format
    parts = url.rstrip("/").split("/", 1)
    if len(parts) == 2:
        return f"{parts[0]}:/{parts[1]}"
    else:
        return f"{parts[0]}:/"


def quote_odata_string(value: str) -> str:
    # Single quotes are escaped by doubling them inside OData literals
    return value.replace("'", "''")


def encode_segment(name: str) -> str:
    return urllib.parse.quote(name, safe="")
