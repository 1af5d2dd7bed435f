"""Object URL parsing and destination naming."""

import posixpath
import re
from typing import NamedTuple
from urllib.parse import quote, unquote, urlsplit

from .exceptions import InvalidReferenceError

# s3.amazonaws.com, s3.eu-west-1.amazonaws.com, s3-eu-west-1.amazonaws.com,
# s3.dualstack.us-east-1.amazonaws.com, s3-accelerate.amazonaws.com
_S3_ENDPOINT = r"s3(?:[.-][a-z0-9-]+)*\.amazonaws\.com(?:\.cn)?"
_PATH_STYLE = re.compile(rf"^{_S3_ENDPOINT}$")
# bucket.<any of the above>
_VIRTUAL_HOSTED = re.compile(rf"^(?P<bucket>.+)\.{_S3_ENDPOINT}$")
_AWS_HOST = re.compile(r"(^|\.)amazonaws\.com(\.cn)?$")


class ObjectLocation(NamedTuple):
    """Container (bucket) and object name (key) of a stored object."""

    container: str
    name: str


def _split_first(path: str, url: str) -> ObjectLocation:
    container, _, name = path.partition("/")
    if not container or not name:
        raise InvalidReferenceError(f"Cannot find container and object name in {url!r}")
    return ObjectLocation(container, name)


def parse_object_url(url: str) -> ObjectLocation:
    """
    Split an object URL into its container and object name.

    Supports ``s3://bucket/key``, virtual-hosted and path-style S3 HTTPS
    URLs, and generic ``https://host/container/name`` storage endpoints.
    Percent-encoded paths are decoded.

    Raises:
        InvalidReferenceError: If the URL does not identify a stored object
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidReferenceError("Object URL is empty")

    try:
        parts = urlsplit(url.strip())
    except ValueError as exc:
        raise InvalidReferenceError(f"Cannot parse object URL {url!r}: {exc}") from exc

    host = (parts.hostname or "").lower()
    path = unquote(parts.path).lstrip("/")

    if parts.scheme == "s3":
        if not parts.netloc or not path:
            raise InvalidReferenceError(f"Cannot find bucket and key in {url!r}")
        return ObjectLocation(parts.netloc, path)

    if parts.scheme not in ("http", "https") or not host:
        raise InvalidReferenceError(f"Unsupported object URL {url!r}")

    if _PATH_STYLE.match(host):
        return _split_first(path, url)

    match = _VIRTUAL_HOSTED.match(host)
    if match:
        if not path:
            raise InvalidReferenceError(f"Cannot find object key in {url!r}")
        return ObjectLocation(match.group("bucket"), path)

    if _AWS_HOST.search(host):
        raise InvalidReferenceError(f"Unrecognized AWS endpoint in {url!r}")

    return _split_first(path, url)


def name_for(source_url: str) -> str:
    """
    Derive the destination object name for a source URL.

    Every variant of one source is stored under this same name in its own
    destination container.
    """
    return parse_object_url(source_url).name


def object_url(container: str, name: str) -> str:
    """Build the canonical ``s3://`` URL for an object."""
    return f"s3://{container}/{quote(name, safe='/')}"


def extension_of(url: str) -> str:
    """File extension (with leading dot) of the object a URL points to, or ''."""
    try:
        name = parse_object_url(url).name
    except InvalidReferenceError:
        name = urlsplit(url).path if isinstance(url, str) else ""
    return posixpath.splitext(name)[1]
