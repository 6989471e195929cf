"""Configuração do feed (metadados, fontes, limites).

Os valores vêm de variáveis de ambiente (ou de um `.env` na raiz do projeto);
tudo o que não estiver definido usa os padrões abaixo.

Uso:
    from config import FeedConfig

    config = FeedConfig.from_env()
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from dotenv import load_dotenv

SOURCE_MODES = ("sitemap", "sitemap-pages", "homepage")

DEFAULT_USER_AGENT = "top5-photo-feed/1.2 (scheduled job; personal use)"


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    """Lista separada por vírgulas (primeira = fonte principal, demais = fallback)."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class FeedConfig:
    # -------- metadados do canal --------
    title: str = "TMZ – Top 5 (Unofficial)"
    description: str = "Top 5 TMZ items (title + link + photo) built from TMZ news + image sitemaps."
    site_url: str = "https://www.tmz.com/"
    language: str = "en"
    ttl: int = 30

    # -------- seleção --------
    max_items: int = 5
    min_title_length: int = 8

    # -------- fontes --------
    source_mode: str = "sitemap"
    news_sitemap_urls: Tuple[str, ...] = ("https://www.tmz.com/sitemaps/news.xml",)
    news_sitemap_count: int = 1
    image_sitemap_index_urls: Tuple[str, ...] = ("https://www.tmz.com/sitemaps/image/index.xml",)
    image_sitemap_count: int = 2
    homepage_urls: Tuple[str, ...] = ("https://www.tmz.com/",)
    story_categories: Tuple[str, ...] = ("news", "photos", "videos")

    # -------- HTTP --------
    user_agent: str = DEFAULT_USER_AGENT
    http_timeout: float = 20.0
    page_fetch_delay: float = 1.0
    page_fetch_pool: int = 25

    out_file: str = "rss.xml"

    def __post_init__(self):
        if self.source_mode not in SOURCE_MODES:
            raise ValueError(f"source_mode must be one of {', '.join(SOURCE_MODES)}, got {self.source_mode!r}")
        if self.max_items < 1:
            raise ValueError("max_items must be at least 1")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "FeedConfig":
        load_dotenv(env_file)
        d = cls.__dataclass_fields__
        return cls(
            title=_env_str("FEED_TITLE", d["title"].default),
            description=_env_str("FEED_DESCRIPTION", d["description"].default),
            site_url=_env_str("SITE_URL", d["site_url"].default),
            language=_env_str("FEED_LANGUAGE", d["language"].default),
            ttl=_env_int("FEED_TTL", d["ttl"].default),
            max_items=_env_int("MAX_ITEMS", d["max_items"].default, minimum=1),
            min_title_length=_env_int("MIN_TITLE_LENGTH", d["min_title_length"].default),
            source_mode=_env_str("SOURCE_MODE", d["source_mode"].default).lower(),
            news_sitemap_urls=_env_list("NEWS_SITEMAP_URLS", d["news_sitemap_urls"].default),
            news_sitemap_count=_env_int("NEWS_SITEMAP_COUNT", d["news_sitemap_count"].default, minimum=1),
            image_sitemap_index_urls=_env_list("IMAGE_SITEMAP_INDEX_URLS", d["image_sitemap_index_urls"].default),
            image_sitemap_count=_env_int("IMAGE_SITEMAP_COUNT", d["image_sitemap_count"].default, minimum=1),
            homepage_urls=_env_list("HOMEPAGE_URLS", d["homepage_urls"].default),
            story_categories=_env_list("STORY_CATEGORIES", d["story_categories"].default),
            user_agent=_env_str("USER_AGENT", d["user_agent"].default),
            http_timeout=_env_float("HTTP_TIMEOUT", d["http_timeout"].default),
            page_fetch_delay=_env_float("PAGE_FETCH_DELAY", d["page_fetch_delay"].default),
            page_fetch_pool=_env_int("PAGE_FETCH_POOL", d["page_fetch_pool"].default, minimum=1),
            out_file=_env_str("OUT_FILE", d["out_file"].default),
        )

    def with_overrides(self, **changes) -> "FeedConfig":
        """Copia a configuração trocando apenas os campos informados (ignora None)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


__all__ = ["FeedConfig", "SOURCE_MODES", "DEFAULT_USER_AGENT"]
