"""Mostra os candidatos que a fonte configurada devolve (e a imagem de cada um).

Uso:
    python tools/diagnose_sources.py --mode homepage -n 10
"""
from pathlib import Path
import sys
import argparse
import json
import logging

# adicionar raiz do projeto para importar os módulos
root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(root))

from config import SOURCE_MODES, FeedConfig
from http_utils import HttpFetcher
from scraper import collect_candidates


def diagnose(config: FeedConfig, count: int = 10, resolve: bool = False):
    fetcher = HttpFetcher(config.user_agent, config.http_timeout)
    candidates, resolver, pool_size = collect_candidates(config, fetcher)

    items = []
    for c in candidates[:count]:
        image = resolver.resolve(c) if resolve else c.image_url
        items.append({
            'title': c.title,
            'link': c.url,
            'image': image,
            'published': c.publish_date,
        })
    return {
        'mode': config.source_mode,
        'candidate_count': len(candidates),
        'pool_size': pool_size,
        'sample': items,
    }


if __name__ == '__main__':
    p = argparse.ArgumentParser()
    p.add_argument('--mode', choices=SOURCE_MODES)
    p.add_argument('--count', '-n', type=int, default=10)
    p.add_argument('--resolve', action='store_true', help='run the image strategies for each sampled candidate')
    args = p.parse_args()

    logging.basicConfig(level=logging.INFO)
    config = FeedConfig.from_env().with_overrides(source_mode=args.mode)
    print(json.dumps(diagnose(config, args.count, args.resolve), ensure_ascii=False, indent=2))
