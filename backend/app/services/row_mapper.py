"""Row mapper — turns one flat CSV row into a nested user object.

Mapping runs in two phases. Column values (and profile defaults) are first
collected into a flat ``{dotted path: value}`` map, which is then expanded into
nested dicts and lists by ``expand_paths``. Expansion only depends on the set
of paths, never on the order they were collected in.

Path syntax: ``contact_info.address[0].address_type.0.value``. ``[N]`` and a
numeric ``.N`` segment both address list position N. In a profile's
``fieldName`` the token ``[]`` stands for "the array occurrence this column
belongs to", resolved from a ``Header[N]`` column name.
"""
import logging
import re
from typing import Any, Mapping

from app.core.config import settings
from app.core.errors import ArrayIndexError, PathConflictError
from app.schemas.profile import Profile, ProfileField

logger = logging.getLogger(__name__)

ACCOUNT_TYPE_PATH = "account_type.value"
ARRAY_TOKEN = "[]"

_COLUMN_INDEX = re.compile(r"^(.*)\[(\d+)\]$")
_PATH_PART = re.compile(r"^([^\[\]]*)((?:\[\d+\])*)$")
_BRACKET_INDEX = re.compile(r"\[(\d+)\]")

Segment = str | int


# ─── Path helpers ───

def split_column(column: str) -> tuple[str, int | None]:
    """Split ``Address[1]`` into ``("Address", 1)``; plain headers get ``None``."""
    m = _COLUMN_INDEX.match(column)
    if m:
        return m.group(1), int(m.group(2))
    return column, None


def concrete_path(field_name: str, index: int | None = None) -> str:
    """Replace every ``[]`` in ``field_name`` with ``[index]`` (``[0]`` when absent).

    Every repeated segment of one field receives the same index.
    """
    if ARRAY_TOKEN not in field_name:
        return field_name
    return field_name.replace(ARRAY_TOKEN, f"[{index or 0}]")


def parse_path(path: str) -> tuple[Segment, ...]:
    """Split a dotted path into keys (str) and list positions (int)."""
    segments: list[Segment] = []
    for part in path.split("."):
        m = _PATH_PART.match(part)
        if m is None:
            segments.append(part)
            continue
        name, indexes = m.groups()
        if name or not indexes:
            # A bare number below the root addresses a list position
            if name.isdigit() and segments:
                segments.append(int(name))
            else:
                segments.append(name)
        segments.extend(int(i) for i in _BRACKET_INDEX.findall(indexes))
    return tuple(segments)


def _child(container: Any, segment: Segment) -> Any:
    if isinstance(container, list):
        return container[segment] if segment < len(container) else None
    return container.get(segment)


def _put(container: Any, segment: Segment, value: Any) -> None:
    if isinstance(container, list):
        if segment >= len(container):
            container.extend([None] * (segment + 1 - len(container)))
        container[segment] = value
    else:
        container[segment] = value


def expand_paths(flat: Mapping[str, Any]) -> dict[str, Any]:
    """Build a nested object from a flat ``{dotted path: value}`` map.

    Raises PathConflictError when one path is a prefix of another, or when the
    same path is given two different values through different spellings.
    """
    parsed: dict[tuple[Segment, ...], tuple[str, Any]] = {}
    for path, value in flat.items():
        key = parse_path(path)
        if key in parsed and parsed[key][1] != value:
            raise PathConflictError(path, parsed[key][0])
        parsed[key] = (path, value)

    for key, (path, _) in parsed.items():
        for n in range(1, len(key)):
            if key[:n] in parsed:
                raise PathConflictError(path, parsed[key[:n]][0])

    root: dict[str, Any] = {}
    for key, (path, value) in parsed.items():
        container: Any = root
        for segment, following in zip(key, key[1:]):
            expected = list if isinstance(following, int) else dict
            child = _child(container, segment)
            if child is None:
                child = expected()
                _put(container, segment, child)
            elif not isinstance(child, expected):
                raise PathConflictError(path, f"{expected.__name__} expected at '{segment}'")
            container = child
        _put(container, key[-1], value)
    return root


# ─── Mapping ───

def _find_field(profile: Profile, header: str) -> ProfileField | None:
    for f in profile.fields:
        if f.header == header:
            return f
    return None


def flatten_row(
    row: Mapping[str, str | None],
    profile: Profile,
    max_index: int | None = None,
) -> dict[str, str]:
    """Collect the row's values, the profile defaults and the account type as dotted paths.

    Raises ArrayIndexError for a mapped ``Header[N]`` column with N above
    ``max_index`` (``MAX_ARRAY_INDEX`` by default).
    """
    if max_index is None:
        max_index = settings.MAX_ARRAY_INDEX
    flat: dict[str, str] = {}

    for column, value in row.items():
        if not value or not column:
            continue
        header, index = split_column(column)
        f = _find_field(profile, header) if header else None
        if f is None or not f.field_name:
            logger.debug("Column %r is not mapped by profile '%s'", column, profile.name)
            continue
        if index is not None and index > max_index:
            raise ArrayIndexError(column, index, max_index)
        flat[concrete_path(f.field_name, index)] = value

    # Compare parsed keys so a[0].b and a.0.b count as the same path
    taken = {parse_path(path) for path in flat}
    for f in profile.fields:
        if not f.default or not f.field_name:
            continue
        path = concrete_path(f.field_name)
        key = parse_path(path)
        if key not in taken:
            flat[path] = f.default
            taken.add(key)

    flat[ACCOUNT_TYPE_PATH] = profile.account_type
    return flat


def map_row(
    row: Mapping[str, str | None],
    profile: Profile,
    max_index: int | None = None,
) -> dict[str, Any]:
    """Map one CSV row through ``profile`` into a nested user object."""
    return expand_paths(flatten_row(row, profile, max_index))
