from urllib.parse import urlencode, urlparse, parse_qsl, urlunparse

from flask import current_app


def append_query(url: str, params: dict) -> str:
    if not url:
        return url
    parts = urlparse(url)
    query = dict(parse_qsl(parts.query))
    query.update({k: v for k, v in params.items() if v is not None})
    new_query = urlencode(query)
    return urlunparse(parts._replace(query=new_query))


def frontend_url(page: str, **params) -> str:
    base_url = current_app.config["FRONTEND_URL"].rstrip("/")
    return append_query(f"{base_url}/{page.lstrip('/')}", params)


def api_url(path: str) -> str:
    base_url = current_app.config["API_URL"].rstrip("/")
    return f"{base_url}/{path.lstrip('/')}"
