"""Resolução da imagem de cada candidato.

Cada estratégia é um callable `(candidate) -> url | None`. O `ImageResolver`
tenta as estratégias na ordem em que foram passadas e para na primeira que
devolver uma URL; candidatos que já têm imagem não são tocados.

Ordem usada pelo pipeline:
    1. IndexLookup  - índice montado a partir dos image sitemaps
    2. PageFetch    - baixa a página da matéria e procura og:image etc.
    3. MarkupScan   - imagem dentro/perto do link na home
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Sequence
from urllib.parse import urljoin, urlparse

from errors import FetchError
from http_utils import HttpFetcher
from markup import closest_block, find_meta, first_image, parse_html
from models import ImageIndex, RawCandidate

logger = logging.getLogger(__name__)

Strategy = Callable[[RawCandidate], Optional[str]]

PAGE_META_KEYS = ("og:image", "twitter:image", "og:image:secure_url")


def normalize_image_url(url: Optional[str], base: Optional[str] = None) -> Optional[str]:
    """URL absoluta http(s) ou None.

    `//cdn/...` vira `https://cdn/...`; caminhos relativos só são resolvidos
    quando `base` é informado.
    """
    if not url:
        return None
    url = url.strip()
    if not url or url.startswith("data:"):
        return None
    if url.startswith("//"):
        url = "https:" + url
    elif base and not urlparse(url).scheme:
        url = urljoin(base, url)
    p = urlparse(url)
    if p.scheme not in ("http", "https") or not p.netloc:
        return None
    return url


def first_srcset_url(srcset: Optional[str]) -> Optional[str]:
    if not srcset:
        return None
    first = srcset.split(",")[0].strip()
    return first.split()[0] if first else None


def img_tag_url(img) -> Optional[str]:
    """data-src (lazy loading) > src > primeira URL do srcset."""
    if img is None:
        return None
    for value in (img.get("data-src"), img.get("src"), first_srcset_url(img.get("srcset"))):
        url = normalize_image_url(value)
        if url:
            return url
    return None


# ============================================================
# 1. ESTRATÉGIAS
# ============================================================


class IndexLookup:
    name = "index"

    def __init__(self, index: ImageIndex):
        self.index = index

    def __call__(self, candidate: RawCandidate) -> Optional[str]:
        return normalize_image_url(self.index.get(candidate.url))


def extract_image_from_page(html: str, page_url: str) -> Optional[str]:
    """Busca a imagem principal no HTML da matéria."""
    soup = parse_html(html)

    for key in PAGE_META_KEYS:
        url = normalize_image_url(find_meta(soup, key), page_url)
        if url:
            return url

    # image_src
    link_img = soup.find("link", rel="image_src")
    if link_img is not None:
        url = normalize_image_url(link_img.get("href"), page_url)
        if url:
            return url

    # Primeira img como último recurso
    img = soup.find("img")
    if img is not None:
        return normalize_image_url(img.get("src"), page_url)

    return None


class PageFetch:
    """Baixa a própria matéria; pausa fixa entre requisições para não ser bloqueado."""

    name = "page"

    def __init__(self, fetcher: HttpFetcher, delay: float = 1.0, sleep: Callable[[float], None] = time.sleep):
        self.fetcher = fetcher
        self.delay = delay
        self.sleep = sleep
        self.fetches = 0

    def __call__(self, candidate: RawCandidate) -> Optional[str]:
        if self.fetches and self.delay > 0:
            self.sleep(self.delay)
        self.fetches += 1

        try:
            html = self.fetcher.fetch_html(candidate.url)
        except FetchError as e:
            logger.warning("No image for %s: %s", candidate.url, e)
            return None
        return extract_image_from_page(html, candidate.url)


class MarkupScan:
    """Imagem aninhada no link da home ou, senão, no bloco que o contém."""

    name = "markup"

    def __call__(self, candidate: RawCandidate) -> Optional[str]:
        anchor = candidate.element
        if anchor is None:
            return None
        url = img_tag_url(first_image(anchor))
        if url:
            return url
        return img_tag_url(first_image(closest_block(anchor)))


# ============================================================
# 2. RESOLVER
# ============================================================


class ImageResolver:
    def __init__(self, strategies: Sequence[Strategy]):
        self.strategies = list(strategies)

    def resolve(self, candidate: RawCandidate) -> Optional[str]:
        current = normalize_image_url(candidate.image_url)
        if current:
            return current

        for strategy in self.strategies:
            url = strategy(candidate)
            if url:
                logger.debug("Image for %s via %s: %s", candidate.url, getattr(strategy, "name", strategy), url)
                candidate.image_url = url
                return url

        logger.debug("No image for %s", candidate.url)
        return None

    __call__ = resolve


__all__ = [
    "Strategy",
    "ImageResolver",
    "IndexLookup",
    "PageFetch",
    "MarkupScan",
    "extract_image_from_page",
    "normalize_image_url",
    "img_tag_url",
    "first_srcset_url",
]
