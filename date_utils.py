"""Utilities para parsear datas de publicação vindas dos sitemaps.

Fornece `parse_date_to_dt`, que aceita ISO-8601 (formato do
`news:publication_date`, ex: '2025-11-26T11:01:00-05:00'), RFC-2822 (ex:
'Wed, 26 Nov 2025 11:01:00 GMT') e, por fim, qualquer coisa que o
`python-dateutil` consiga ler. Retorna um `datetime` timezone-aware ou
`None` se não for possível parsear.

Uso:
    from date_utils import parse_date_to_dt, publish_date_or_now

    dt = parse_date_to_dt('2025-11-26T11:01:00Z')
    if dt:
        iso = dt.isoformat()  # '2025-11-26T11:01:00+00:00'
"""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Optional

from dateutil import parser as dateutil_parser


def _as_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_date_to_dt(s: Optional[str]) -> Optional[datetime]:
    """Converte uma string de data para `datetime` timezone-aware.

    Datas sem fuso são tratadas como UTC.
    """
    if not s or not s.strip():
        return None
    s = s.strip()

    # 1) ISO-8601 (sitemaps); fromisoformat antigo não aceita 'Z'
    try:
        iso = s[:-1] + "+00:00" if s.endswith("Z") else s
        return _as_aware(datetime.fromisoformat(iso))
    except ValueError:
        pass

    # 2) RFC-2822
    try:
        dt = parsedate_to_datetime(s)
        if dt is not None:
            return _as_aware(dt)
    except (TypeError, ValueError, IndexError):
        pass

    # 3) fallback mais permissivo
    try:
        return _as_aware(dateutil_parser.parse(s))
    except (ValueError, OverflowError):
        return None


def publish_date_or_now(s: Optional[str], now: Callable[[], datetime] = None) -> datetime:
    """Data de publicação do item ou o horário atual (UTC) se ausente/inválida."""
    dt = parse_date_to_dt(s)
    if dt is not None:
        return dt
    if now is not None:
        return now()
    return datetime.now(timezone.utc)


__all__ = ["parse_date_to_dt", "publish_date_or_now"]
