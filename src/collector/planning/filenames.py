"""Filename inference and filename/path helpers for download planning."""

from __future__ import annotations

import re
from typing import NamedTuple
from urllib.parse import parse_qs, urlsplit

IMAGE_EXTENSIONS = frozenset(
    {
        ".jpg",
        ".jpeg",
        ".png",
        ".gif",
        ".webp",
        ".svg",
        ".bmp",
        ".ico",
        ".avif",
        ".tiff",
        ".tif",
    }
)

DEFAULT_NAME = "image"
DEFAULT_EXTENSION = ".jpg"
DATA_URL_EXTENSION = ".png"

GENERIC_TERMS = frozenset(
    {"image", "photo", "images", "photos", "media", "assets", "static", "cdn"}
)
SKIPPED_HOST_TOKENS = frozenset({"www", "cdn", "static", "images", "img", "media"})
FORMAT_QUERY_KEYS = ("format", "f", "type")

_DATA_URL_PREFIX = "data:image/"
_DATA_URL_FORMAT = re.compile(r"^data:image/(\w+)", re.ASCII)
_SEGMENT_EXTENSION = re.compile(r"\.(\w+)$", re.ASCII)
_TRAILING_SUFFIX = re.compile(r"(\.[^.]+)$")
_ILLEGAL_CHARACTERS = re.compile(r'[<>:"/\\|?*]')
_ILLEGAL_DIRECTORY_CHARACTERS = re.compile(r'[<>:"|?*]')
_NUMERIC = re.compile(r"^\d+$")
_FORMAT_TOKEN = re.compile(r"^\w+$", re.ASCII)


class ResolvedFilename(NamedTuple):
    """Base name and extension inferred for a single image URL."""

    name: str
    extension: str


class SplitFilename(NamedTuple):
    """Filename split at a recognized image extension."""

    name: str
    extension: str


def resolve_filename(url: str) -> ResolvedFilename:
    """Infer a base filename and extension from an image URL.

    The lookup never fails: data URLs, generic path segments, extension-less
    paths and malformed URLs all degrade to progressively more generic names,
    ending with ``image.jpg``.

    Args:
        url: Source URL of the image.

    Returns:
        ResolvedFilename: Name without extension and the dotted, lowercase
        extension.
    """

    name = ""
    extension = ""

    if url.startswith(_DATA_URL_PREFIX):
        match = _DATA_URL_FORMAT.match(url)
        extension = format_extension(match.group(1)) if match else DATA_URL_EXTENSION
    else:
        try:
            name, extension = _resolve_from_parsed_url(url)
        except ValueError:
            name, extension = _resolve_naively(url)

    return ResolvedFilename(name or DEFAULT_NAME, extension or DEFAULT_EXTENSION)


def default_filename(url: str) -> str:
    """Return the filename the resolver generates for ``url``, extension included."""
    resolved = resolve_filename(url)
    return resolved.name + resolved.extension


def has_image_extension(filename: str) -> bool:
    """Return True when ``filename`` ends with a recognized image extension."""
    if not filename:
        return False
    match = _TRAILING_SUFFIX.search(filename)
    return bool(match) and match.group(1).lower() in IMAGE_EXTENSIONS


def split_filename(filename: str | None) -> SplitFilename:
    """Split ``filename`` into name and extension.

    Only recognized image extensions count as an extension boundary, so dots
    inside a name (``Screenshot 2.30 PM.png``) stay part of the name.

    Args:
        filename: Filename to split; ``None`` is treated as empty.

    Returns:
        SplitFilename: Name and extension (extension is ``""`` when none of
        the recognized suffixes match). The extension keeps its original case.
    """

    if not filename:
        return SplitFilename("", "")

    match = _TRAILING_SUFFIX.search(filename)
    if match and match.group(1).lower() in IMAGE_EXTENSIONS:
        suffix = match.group(1)
        return SplitFilename(filename[: -len(suffix)], suffix)

    return SplitFilename(filename, "")


def split_filename_with_fallback(filename: str, fallback_extension: str) -> SplitFilename:
    """Split ``filename``, using ``fallback_extension`` when it has no image extension."""
    result = split_filename(filename)
    if result.extension:
        return result
    return SplitFilename(filename, fallback_extension)


def sanitize_filename(value: str | None) -> str:
    """Replace characters that are illegal in common filesystems with ``_``."""
    if not value:
        return ""
    return _ILLEGAL_CHARACTERS.sub("_", value)


def sanitize_directory_path(path: str | None) -> str:
    """Normalize a relative directory path for download destinations.

    Illegal characters become ``_``, backslashes become forward slashes,
    repeated slashes collapse and leading/trailing slashes are dropped.
    """

    if not path:
        return ""
    cleaned = _ILLEGAL_DIRECTORY_CHARACTERS.sub("_", path)
    cleaned = cleaned.replace("\\", "/")
    cleaned = re.sub(r"/+", "/", cleaned)
    return cleaned.strip("/")


def compose_renamed_filename(new_name: str, current_filename: str | None, url: str) -> str:
    """Turn a user-typed name into a full filename.

    A name that already ends with an image extension is used as typed;
    otherwise the extension of ``current_filename`` is kept, falling back to
    the extension resolved from ``url``.

    Args:
        new_name: Name typed by the user.
        current_filename: Filename currently in use, if any.
        url: Source URL of the image.

    Returns:
        str: Sanitized filename, or ``""`` when ``new_name`` is blank.
    """

    cleaned = sanitize_filename(new_name.strip())
    if not cleaned or has_image_extension(cleaned):
        return cleaned
    extension = split_filename(current_filename).extension
    return cleaned + (extension or resolve_filename(url).extension)


def format_extension(value: str | None) -> str:
    """Turn an image format such as ``JPEG`` or ``.png`` into a dotted extension.

    Returns ``""`` for values that are not a single word, so path separators
    or traversal segments never reach a filename.
    """
    token = (value or "").strip().lstrip(".")
    if not _FORMAT_TOKEN.match(token):
        return ""
    return "." + token.lower().replace("jpeg", "jpg", 1)


def build_file_path(directory: str, filename: str) -> str:
    """Join ``directory`` and ``filename`` with a single forward slash."""
    if not directory:
        return filename
    return directory.rstrip("/\\") + "/" + filename


# ---------------------------------------------------------------------- #
# Helpers                                                                #
# ---------------------------------------------------------------------- #


def _resolve_from_parsed_url(url: str) -> tuple[str, str]:
    parts = urlsplit(url)
    if not parts.scheme:
        raise ValueError(f"URL has no scheme: {url!r}")

    segments = parts.path.split("/")
    last_segment = segments[-1]

    name = last_segment
    extension = ""
    match = _SEGMENT_EXTENSION.search(last_segment)
    if match:
        extension = "." + match.group(1).lower()
        name = last_segment[: -len(extension)]
    else:
        extension = format_extension(_format_hint(parts.query))

    if not name or name.lower() in GENERIC_TERMS:
        meaningful = _nearest_meaningful_segment(segments[:-1])
        if meaningful:
            name = meaningful

    if not name:
        host_token = _host_token(parts.hostname or "")
        if host_token:
            name = f"{host_token}_image"

    return name, extension


def _resolve_naively(url: str) -> tuple[str, str]:
    name = url.split("/")[-1]
    extension = ""
    match = _SEGMENT_EXTENSION.search(name)
    if match:
        extension = "." + match.group(1).lower()
        name = name[: -len(extension)]
    return name, extension


def _format_hint(query: str) -> str:
    params = parse_qs(query, keep_blank_values=True)
    for key in FORMAT_QUERY_KEYS:
        values = params.get(key)
        if values and values[0]:
            return values[0]
    return ""


def _nearest_meaningful_segment(segments: list[str]) -> str:
    for segment in reversed(segments):
        if not segment or _NUMERIC.match(segment):
            continue
        if segment.lower() in GENERIC_TERMS:
            continue
        return segment
    return ""


def _host_token(hostname: str) -> str:
    for token in hostname.split("."):
        if token not in SKIPPED_HOST_TOKENS and len(token) > 2:
            return token
    return ""


__all__ = [
    "IMAGE_EXTENSIONS",
    "DEFAULT_NAME",
    "DEFAULT_EXTENSION",
    "GENERIC_TERMS",
    "SKIPPED_HOST_TOKENS",
    "ResolvedFilename",
    "SplitFilename",
    "resolve_filename",
    "default_filename",
    "has_image_extension",
    "split_filename",
    "split_filename_with_fallback",
    "sanitize_filename",
    "sanitize_directory_path",
    "compose_renamed_filename",
    "format_extension",
    "build_file_path",
]
