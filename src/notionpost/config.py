"""Configuration for notionpost.

:class:`NotionPostConfig` captures every tuneable knob of the retrieval
and rendering pipeline.  It is validated once, at construction, and then
passed explicitly to :class:`~notionpost.client.PostClient`; nothing in
the package reads the process environment except
:meth:`NotionPostConfig.from_env`.

The preferred-name tuples drive the heuristic property resolver: names
are tried in order before falling back to the first property of a
matching type, which lets the same code read English and Japanese
database schemas.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from notionpost.errors import ConfigurationError

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_PUBLISHED_KEYWORDS: frozenset[str] = frozenset({
    "published",
    "publish",
    "public",
    "done",
    "complete",
    "completed",
    "live",
    "公開",
    "公開中",
    "公開済み",
    "完了",
})
"""Lower-cased status names that mark a record as published."""

DEFAULT_TITLE_NAMES: tuple[str, ...] = ("Title", "Name", "タイトル", "名前")
DEFAULT_SUBTITLE_NAMES: tuple[str, ...] = (
    "Subtitle", "Excerpt", "Summary", "Description", "サブタイトル", "概要",
)
DEFAULT_CONTENT_NAMES: tuple[str, ...] = ("Content", "Body", "本文")
DEFAULT_TAG_NAMES: tuple[str, ...] = ("Tags", "Tag", "Category", "タグ", "カテゴリ")
DEFAULT_PUBLISH_NAMES: tuple[str, ...] = (
    "Status", "Published", "Publish", "公開", "ステータス", "状態",
)
DEFAULT_SLUG_NAMES: tuple[str, ...] = ("Slug", "スラッグ")

ENV_TOKEN = "NOTION_TOKEN"
ENV_DATABASE_ID = "NOTION_DATABASE_ID"
ENV_VERSION = "NOTION_VERSION"


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class NotionPostConfig:
    """Complete configuration for a notionpost client.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**  Never logged.
    database_id:
        ID of the database whose rows are posts.  **Required.**
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        API root URL.  Override for proxy or testing environments.
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    page_size:
        ``page_size`` sent with paginated requests (Notion caps it at 100).
    max_pages:
        Upper bound on pages fetched by one paginated call.
    max_depth:
        Deepest block level fetched below a page.  Direct page children
        are depth 1; deeper children are silently left unfetched.
    fetch_concurrency:
        Maximum concurrent ``list children`` calls while walking a tree.
    backfill_content:
        When listing posts, fetch the body of posts whose ``content``
        property is empty.
    backfill_concurrency:
        Maximum posts enriched concurrently during backfill.
    published_keywords:
        Lower-cased status / select names that count as published.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    database_id: str = ""

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Pagination & traversal ─────────────────────────────────────────
    page_size: int = 100

    max_pages: int = 1000

    max_depth: int = 10

    fetch_concurrency: int = 8

    # ── Posts ───────────────────────────────────────────────────────────
    backfill_content: bool = True

    backfill_concurrency: int = 4

    title_names: tuple[str, ...] = DEFAULT_TITLE_NAMES

    subtitle_names: tuple[str, ...] = DEFAULT_SUBTITLE_NAMES

    content_names: tuple[str, ...] = DEFAULT_CONTENT_NAMES

    tag_names: tuple[str, ...] = DEFAULT_TAG_NAMES

    publish_names: tuple[str, ...] = DEFAULT_PUBLISH_NAMES

    slug_names: tuple[str, ...] = DEFAULT_SLUG_NAMES

    published_keywords: frozenset[str] = field(
        default_factory=lambda: DEFAULT_PUBLISHED_KEYWORDS,
    )

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        if not self.token:
            raise ConfigurationError(
                f"Missing Notion token (set {ENV_TOKEN})",
                context={"setting": "token"},
            )
        if not self.database_id:
            raise ConfigurationError(
                f"Missing Notion database id (set {ENV_DATABASE_ID})",
                context={"setting": "database_id"},
            )

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ConfigurationError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'",
                context={"setting": "base_url"},
            )

        if not 1 <= self.page_size <= 100:
            raise ConfigurationError(
                f"page_size must be between 1 and 100, got {self.page_size}",
                context={"setting": "page_size"},
            )
        for name in ("max_pages", "max_depth", "fetch_concurrency", "backfill_concurrency"):
            value = getattr(self, name)
            if value < 1:
                raise ConfigurationError(
                    f"{name} must be >= 1, got {value}",
                    context={"setting": name},
                )
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                f"timeout_seconds must be > 0, got {self.timeout_seconds}",
                context={"setting": "timeout_seconds"},
            )

        self.published_keywords = frozenset(
            k.strip().lower() for k in self.published_keywords
        )

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> NotionPostConfig:
        """Build a configuration from ``NOTION_*`` environment variables.

        Keyword *overrides* win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "token": env.get(ENV_TOKEN, ""),
            "database_id": env.get(ENV_DATABASE_ID, ""),
        }
        if env.get(ENV_VERSION):
            values["notion_version"] = env[ENV_VERSION]
        values.update(overrides)
        return cls(**values)

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NotionPostConfig({', '.join(parts)})"
