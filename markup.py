"""Parsing de XML (sitemaps) e HTML (home e páginas de matéria).

As duas funções de parse nunca levantam exceção para o chamador: um documento
que não pode ser lido vira um documento vazio, e o código de extração trabalha
só com checagens de presença (`find(...)` retornando None).
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from bs4 import BeautifulSoup, Tag

from errors import ParseError

logger = logging.getLogger(__name__)

BLOCK_TAGS = ("article", "li", "div")
_WS_RE = re.compile(r"\s+")


def _soup(text: str, features: str) -> BeautifulSoup:
    if text is None:
        raise ParseError("no document")
    try:
        return BeautifulSoup(text, features)
    except Exception as e:
        raise ParseError(str(e)) from e


def parse_xml(text: str) -> BeautifulSoup:
    """Parse XML keeping namespaced names (`news:title`, `image:loc`)."""
    try:
        return _soup(text, "lxml-xml")
    except ParseError as e:
        logger.warning("Could not parse XML document: %s", e)
        return BeautifulSoup("", "lxml-xml")


def parse_html(text: str) -> BeautifulSoup:
    try:
        return _soup(text, "html.parser")
    except ParseError as e:
        logger.warning("Could not parse HTML document: %s", e)
        return BeautifulSoup("", "html.parser")


def text_of(node) -> Optional[str]:
    """Texto de um campo que pode faltar, vir vazio, em CDATA ou com filhos.

    Único ponto que trata essas variações; o resto do código só recebe
    `str` ou `None`.
    """
    if node is None:
        return None
    if isinstance(node, str):
        value = node
    else:
        value = node.get_text()
    value = value.strip()
    return value or None


def collapse_ws(s: Optional[str]) -> str:
    return _WS_RE.sub(" ", s or "").strip()


def find_meta(soup, key: str) -> Optional[str]:
    """`content` de um <meta> buscado por `property` ou por `name`."""
    for attr in ("property", "name"):
        tag = soup.find("meta", attrs={attr: key})
        if tag is not None and tag.get("content"):
            return tag["content"].strip() or None
    return None


def closest_block(tag: Tag, names: Iterable[str] = BLOCK_TAGS) -> Optional[Tag]:
    names = tuple(names)
    for parent in tag.parents:
        if getattr(parent, "name", None) in names:
            return parent
    return None


def first_image(tag: Optional[Tag]) -> Optional[Tag]:
    if tag is None:
        return None
    return tag.find("img")


__all__ = [
    "parse_xml",
    "parse_html",
    "text_of",
    "collapse_ws",
    "find_meta",
    "closest_block",
    "first_image",
    "BLOCK_TAGS",
]
