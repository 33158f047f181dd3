"""Front-matter parsing for Markdown documents.

A document starts with a delimited metadata block followed by its body::

    ---
    title: Coroutines from scratch
    description: Building a generator by hand
    date: 2023-04-02
    tags: [cpp, coroutines]
    draft: false
    ---
    Body text...

``---`` blocks are YAML, ``---json`` blocks are JSON and ``+++`` blocks are
TOML. Recognised keys are ``title``, ``description``, ``date``, ``tags`` and
``draft``, plus ``nav`` (``{key, order}``, also accepted under Eleventy's
``eleventyNavigation`` name) for pages that belong in the navigation menu and
``slug`` to override the path-derived identifier. Any other key is preserved
in ``FrontMatter.params``.
"""

from __future__ import annotations

import datetime as dt
import json
import tomllib
from dataclasses import dataclass
from typing import Any, Optional

import pydantic
import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from folio.exceptions import FrontMatterError

# Opening delimiter -> (format, closing delimiter)
_DELIMITERS = {
    "---": ("yaml", "---"),
    "---yaml": ("yaml", "---"),
    "---json": ("json", "---"),
    "+++": ("toml", "+++"),
}
_NAV_KEYS = ("nav", "eleventyNavigation")


def _number_to_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class _FrontMatterDumper(yaml.SafeDumper):
    """SafeDumper that also writes times of day, which TOML blocks can hold."""


_FrontMatterDumper.add_representer(
    dt.time,
    lambda dumper, value: dumper.represent_scalar("tag:yaml.org,2002:str", value.isoformat()),
)


class Navigation(BaseModel):
    """Placement of a page in the site menu."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str
    order: int = 0

    @field_validator("key", mode="before")
    @classmethod
    def _numeric_key(cls, value: Any) -> Any:
        return _number_to_text(value)

    @field_validator("key")
    @classmethod
    def _key_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("navigation key cannot be empty")
        return value


class FrontMatter(BaseModel):
    """Validated front-matter of a single document."""

    model_config = ConfigDict(frozen=True, extra="allow")

    title: str
    description: str = ""
    date: Optional[dt.date] = None
    tags: frozenset[str] = frozenset()
    draft: bool = False
    # `eleventyNavigation` is the name Eleventy sites use for the same block
    nav: Optional[Navigation] = Field(
        default=None, validation_alias=AliasChoices(*_NAV_KEYS)
    )
    slug: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _default_nav_key(cls, data: Any) -> Any:
        # A bare `nav: {order: 2}` is labelled with the page title.
        if not isinstance(data, dict) or data.get("title") is None:
            return data
        for name in _NAV_KEYS:
            nav = data.get(name)
            if isinstance(nav, dict) and "key" not in nav:
                data = {**data, name: {**nav, "key": str(data["title"])}}
        return data

    @field_validator("title", "description", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, dt.date):
            return str(value)
        return _number_to_text(value)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title is required and cannot be empty")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str):
            text = value.strip()
            try:
                return dt.date.fromisoformat(text)
            except ValueError:
                pass
            try:
                return dt.datetime.fromisoformat(text).date()
            except ValueError:
                raise ValueError(f"invalid date {value!r}") from None
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple, set, frozenset)):
            tags = set()
            for tag in value:
                if not isinstance(tag, (str, int, float)) or isinstance(tag, bool):
                    raise ValueError(f"invalid tag {tag!r}")
                tag = str(tag).strip()
                if tag:
                    tags.add(tag)
            return frozenset(tags)
        return value

    @field_validator("draft", mode="before")
    @classmethod
    def _null_draft(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("slug", mode="before")
    @classmethod
    def _clean_slug(cls, value: Any) -> Any:
        value = _number_to_text(value)
        if isinstance(value, str):
            value = value.strip().strip("/")
            return value or None
        return value

    @property
    def params(self) -> dict[str, Any]:
        """Front-matter keys this model does not recognise."""
        return dict(self.model_extra or {})


@dataclass(frozen=True)
class ParsedDocument:
    """A document split into validated front-matter and raw body."""

    front_matter: FrontMatter
    body: str
    format: str = "yaml"
    source: Optional[str] = None

    @property
    def title(self) -> str:
        return self.front_matter.title

    @property
    def description(self) -> str:
        return self.front_matter.description

    @property
    def date(self) -> Optional[dt.date]:
        return self.front_matter.date

    @property
    def tags(self) -> frozenset[str]:
        return self.front_matter.tags

    @property
    def draft(self) -> bool:
        return self.front_matter.draft

    @property
    def nav(self) -> Optional[Navigation]:
        return self.front_matter.nav


def split_front_matter(text: str, source: str | None = None) -> tuple[str, str, str]:
    """
    Split raw document text into its front-matter block and body.

    Args:
        text: Full document text
        source: Optional file name used in error messages

    Returns:
        Tuple of (format, block, body) where format is "yaml", "json" or "toml"

    Raises:
        FrontMatterError: If the document has no block or the block is unterminated
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.splitlines(keepends=True)

    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start == len(lines):
        raise FrontMatterError("document is empty", source)

    opener = lines[start].strip()
    if opener not in _DELIMITERS:
        raise FrontMatterError("missing front-matter block", source)
    fmt, closer = _DELIMITERS[opener]

    for end in range(start + 1, len(lines)):
        if lines[end].strip() == closer:
            block = "".join(lines[start + 1 : end])
            body = "".join(lines[end + 1 :]).lstrip("\r\n")
            return fmt, block, body

    raise FrontMatterError("unterminated front-matter block", source)


def _load_block(fmt: str, block: str, source: str | None) -> dict[str, Any]:
    try:
        if fmt == "toml":
            data = tomllib.loads(block)
        elif fmt == "json":
            data = json.loads(block) if block.strip() else None
        else:
            data = yaml.safe_load(block)
    except (yaml.YAMLError, tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise FrontMatterError(f"malformed {fmt} front-matter: {e}", source) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError("front-matter must be a mapping of keys to values", source)
    return data


def parse_front_matter(text: str, source: str | None = None) -> ParsedDocument:
    """
    Parse a document's front-matter and return it with the body.

    Args:
        text: Full document text
        source: Optional file name used in error messages

    Returns:
        ParsedDocument with validated front-matter

    Raises:
        FrontMatterError: If the block is missing, malformed or fails validation
    """
    fmt, block, body = split_front_matter(text, source)
    data = _load_block(fmt, block, source)

    try:
        front_matter = FrontMatter.model_validate(data)
    except pydantic.ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or None
        message = error["msg"]
        if field:
            message = f"invalid '{field}': {message}"
        raise FrontMatterError(message, source, field) from e

    return ParsedDocument(front_matter=front_matter, body=body, format=fmt, source=source)


def dump_front_matter(front_matter: FrontMatter) -> str:
    """Render front-matter as a YAML block, delimiters included."""
    data: dict[str, Any] = {
        "title": front_matter.title,
        "description": front_matter.description,
    }
    if front_matter.date is not None:
        data["date"] = front_matter.date
    data["tags"] = sorted(front_matter.tags)
    data["draft"] = front_matter.draft
    if front_matter.nav is not None:
        data["nav"] = {"key": front_matter.nav.key, "order": front_matter.nav.order}
    if front_matter.slug is not None:
        data["slug"] = front_matter.slug
    data.update(front_matter.params)

    dumped = yaml.dump(
        data,
        Dumper=_FrontMatterDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )
    return f"---\n{dumped}---\n"


def render_document(front_matter: FrontMatter, body: str) -> str:
    """Render a complete Markdown document from front-matter and body."""
    return f"{dump_front_matter(front_matter)}\n{body}"
