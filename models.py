"""Tipos de dados do pipeline (candidatos, itens finais, entradas de sitemap)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

# url da matéria -> url da primeira imagem encontrada
ImageIndex = Dict[str, str]


@dataclass
class RawCandidate:
    """Candidate story as found in a source document.

    Only `image_url` is filled in later (by the image resolver). `element`
    keeps the homepage anchor around for the markup strategy.
    """

    url: str
    title: Optional[str] = None
    image_url: Optional[str] = None
    publish_date: Optional[str] = None
    element: Optional[Any] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class ResolvedItem:
    url: str
    title: str
    image_url: str
    publish_date: datetime


@dataclass(frozen=True)
class SitemapEntry:
    loc: str
    lastmod: Optional[str] = None


__all__ = ["ImageIndex", "RawCandidate", "ResolvedItem", "SitemapEntry"]
