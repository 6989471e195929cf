import argparse
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from config import SOURCE_MODES, FeedConfig
from date_utils import publish_date_or_now
from errors import FeedError, FetchError, InsufficientItemsError, SourceError
from feed_writer import FeedMeta, build_rss
from homepage_utils import homepage_candidates
from http_utils import HttpFetcher
from image_utils import ImageResolver, IndexLookup, MarkupScan, PageFetch
from models import ImageIndex, RawCandidate, ResolvedItem
from sitemap_utils import build_image_index, news_candidates

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ============================================================
# 1. FONTES (principal + fallbacks)
# ============================================================


def first_available(urls: Sequence[str], load: Callable[[str], T], what: str = "source") -> T:
    """Tenta cada URL na ordem; a primeira que funcionar vence.

    Se todas falharem, levanta o último erro.
    """
    if not urls:
        raise SourceError(f"No {what} URL configured")

    last_error: Optional[FeedError] = None
    for url in urls:
        try:
            return load(url)
        except (FetchError, SourceError) as e:
            logger.warning("%s failed (%s): %s", what, url, e)
            last_error = e
    raise last_error


def load_news(fetcher: HttpFetcher, config: FeedConfig) -> List[RawCandidate]:
    return first_available(
        config.news_sitemap_urls,
        lambda url: news_candidates(fetcher, url, config.news_sitemap_count),
        "news sitemap",
    )


def load_image_index(fetcher: HttpFetcher, config: FeedConfig) -> ImageIndex:
    return first_available(
        config.image_sitemap_index_urls,
        lambda url: build_image_index(fetcher, url, config.image_sitemap_count),
        "image sitemap index",
    )


def load_homepage(fetcher: HttpFetcher, config: FeedConfig) -> List[RawCandidate]:
    return first_available(
        config.homepage_urls,
        lambda url: homepage_candidates(
            fetcher,
            url,
            config.site_url,
            config.story_categories,
            config.min_title_length,
        ),
        "homepage",
    )


# ============================================================
# 2. SELEÇÃO
# ============================================================


def select_items(
    candidates: Iterable[RawCandidate],
    max_items: int,
    resolve: Optional[Callable[[RawCandidate], Optional[str]]] = None,
    pool_size: Optional[int] = None,
    now=None,
) -> List[ResolvedItem]:
    """Primeiros `max_items` candidatos com título, link e imagem, na ordem da fonte.

    A imagem é resolvida só quando o candidato chega na vez dele, então as
    buscas secundárias param assim que a lista fecha. Com `pool_size`, só os
    primeiros `pool_size` candidatos são considerados; uma URL repetida
    só é ignorada depois que uma cópia dela entrou na lista.
    """
    chosen: List[ResolvedItem] = []
    seen = set()
    scanned = 0

    for c in candidates:
        if len(chosen) >= max_items:
            break
        if pool_size is not None and scanned >= pool_size:
            break
        if not c.url or c.url in seen:
            continue
        scanned += 1

        title = (c.title or "").strip()
        if not title:
            continue

        image = resolve(c) if resolve is not None else c.image_url
        if not image:
            continue

        chosen.append(
            ResolvedItem(
                url=c.url,
                title=title,
                image_url=image,
                publish_date=publish_date_or_now(c.publish_date, now),
            )
        )
        seen.add(c.url)

    if len(chosen) < max_items:
        detail = f"scanned {scanned} candidates"
        raise InsufficientItemsError(len(chosen), max_items, detail)
    return chosen


# ============================================================
# 3. PIPELINE
# ============================================================


def fetch_news_and_index(fetcher: HttpFetcher, config: FeedConfig):
    """News sitemap e índice de imagens em paralelo (fontes independentes).

    Devolve os candidatos e o future do índice, já concluído.
    """
    with ThreadPoolExecutor(max_workers=2) as executor:
        news_future = executor.submit(load_news, fetcher, config)
        index_future = executor.submit(load_image_index, fetcher, config)
        candidates = news_future.result()
    return candidates, index_future


def collect_candidates(config: FeedConfig, fetcher: HttpFetcher):
    """Candidatos + resolver de imagem + limite do pool, conforme o modo de fonte."""
    mode = config.source_mode

    if mode == "sitemap":
        candidates, index_future = fetch_news_and_index(fetcher, config)
        return candidates, ImageResolver([IndexLookup(index_future.result())]), None

    page_fetch = PageFetch(fetcher, config.page_fetch_delay)

    if mode == "sitemap-pages":
        strategies = []
        if config.image_sitemap_index_urls:
            candidates, index_future = fetch_news_and_index(fetcher, config)
            try:
                strategies.append(IndexLookup(index_future.result()))
            except (FetchError, SourceError) as e:
                # aqui o índice é só um atalho; as páginas ainda resolvem
                logger.warning("Continuing without image index: %s", e)
        else:
            candidates = load_news(fetcher, config)
        strategies.append(page_fetch)
        return candidates, ImageResolver(strategies), config.page_fetch_pool

    if mode == "homepage":
        candidates = load_homepage(fetcher, config)
        return candidates, ImageResolver([page_fetch, MarkupScan()]), config.page_fetch_pool

    raise ValueError(f"Unknown source mode {mode!r}")


def build_items(config: FeedConfig, fetcher: Optional[HttpFetcher] = None, now=None) -> List[ResolvedItem]:
    if fetcher is None:
        fetcher = HttpFetcher(config.user_agent, config.http_timeout)

    candidates, resolver, pool_size = collect_candidates(config, fetcher)
    items = select_items(candidates, config.max_items, resolver, pool_size, now)
    logger.info("Selected %d items (%s mode)", len(items), config.source_mode)
    return items


def build_feed(config: FeedConfig, fetcher: Optional[HttpFetcher] = None, now=None) -> str:
    items = build_items(config, fetcher, now)
    return build_rss(FeedMeta.from_config(config), items, now() if now else None)


# ============================================================
# 4. CLI
# ============================================================


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Build a 5-item photo RSS feed from a news site's sitemaps or homepage.")
    p.add_argument("--out", "-o", help="output file (default: OUT_FILE or rss.xml)")
    p.add_argument("--mode", choices=SOURCE_MODES, help="where candidates and images come from")
    p.add_argument("--env-file", help="read configuration from this .env file")
    p.add_argument("--verbose", "-v", action="store_true")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = FeedConfig.from_env(args.env_file).with_overrides(out_file=args.out, source_mode=args.mode)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    try:
        items = build_items(config)
        xml = build_rss(FeedMeta.from_config(config), items)
    except FeedError as e:
        logger.error("%s", e)
        return 1

    # só grava depois que o feed inteiro foi montado
    with open(config.out_file, "w", encoding="utf-8") as f:
        f.write(xml)
    print(f"Wrote {config.out_file} with {len(items)} items.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
