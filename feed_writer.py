"""Geração do RSS 2.0 (com Media RSS para a foto de cada item)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional, Sequence
from urllib.parse import urlparse

from lxml import etree

from models import ResolvedItem

MEDIA_NS = "http://search.yahoo.com/mrss/"
GENERATOR = "top5-photo-feed"


@dataclass(frozen=True)
class FeedMeta:
    title: str
    description: str
    site_url: str
    language: str = "en"
    ttl: int = 30

    @classmethod
    def from_config(cls, config) -> "FeedMeta":
        return cls(
            title=config.title,
            description=config.description,
            site_url=config.site_url,
            language=config.language,
            ttl=config.ttl,
        )


def guess_image_type(url: str) -> str:
    path = (urlparse(url).path or url).lower()
    if path.endswith(".png"):
        return "image/png"
    if path.endswith(".webp"):
        return "image/webp"
    return "image/jpeg"


def _rfc822(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt)


def _item(channel, item: ResolvedItem):
    node = etree.SubElement(channel, "item")
    etree.SubElement(node, "title").text = item.title
    etree.SubElement(node, "link").text = item.url
    etree.SubElement(node, "guid", isPermaLink="true").text = item.url
    etree.SubElement(node, "pubDate").text = _rfc822(item.publish_date)

    etree.SubElement(
        node,
        "enclosure",
        url=item.image_url,
        length="0",
        type=guess_image_type(item.image_url),
    )
    etree.SubElement(node, f"{{{MEDIA_NS}}}content", url=item.image_url, medium="image")
    etree.SubElement(node, f"{{{MEDIA_NS}}}thumbnail", url=item.image_url)
    return node


def build_rss(meta: FeedMeta, items: Sequence[ResolvedItem], build_date: Optional[datetime] = None) -> str:
    rss = etree.Element("rss", version="2.0", nsmap={"media": MEDIA_NS})
    channel = etree.SubElement(rss, "channel")
    etree.SubElement(channel, "title").text = meta.title
    etree.SubElement(channel, "link").text = meta.site_url
    etree.SubElement(channel, "description").text = meta.description
    etree.SubElement(channel, "language").text = meta.language
    etree.SubElement(channel, "ttl").text = str(meta.ttl)
    etree.SubElement(channel, "lastBuildDate").text = _rfc822(build_date or datetime.now(timezone.utc))
    etree.SubElement(channel, "generator").text = GENERATOR

    for item in items:
        _item(channel, item)

    return etree.tostring(rss, encoding="UTF-8", xml_declaration=True, pretty_print=True).decode("utf-8")


__all__ = ["FeedMeta", "build_rss", "guess_image_type", "MEDIA_NS"]
