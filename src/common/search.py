from functools import reduce
from operator import or_

from django.db import connections
from django.db.models import Q, QuerySet

from src.common.languages import supported_languages


def localized_search_q(term: str, *fields: str) -> Q:
    """OR together case-insensitive matches of `term` in every language of each per-language JSON field."""
    term = term.strip()
    return reduce(
        or_,
        (Q(**{f"{field}__{lang}__icontains": term}) for field in fields for lang in supported_languages()),
    )


def filter_by_tag(qs: QuerySet, tag: str, field: str = "tags") -> QuerySet:
    """
    Keep rows whose JSON tag list holds `tag` (tags are stored lowercased).

    PostgreSQL answers with a jsonb containment lookup; SQLite has none, so the
    matching ids are collected in Python there.
    """
    wanted = tag.strip().lower()
    if connections[qs.db].vendor == "postgresql":
        return qs.filter(**{f"{field}__contains": [wanted]})
    ids = [pk for pk, tags in qs.values_list("id", field) if wanted in [str(t).lower() for t in tags or []]]
    return qs.filter(id__in=ids)
