"""Closed topic taxonomy and normalization of free-form topic strings."""

from __future__ import annotations

import re
from enum import StrEnum
from types import MappingProxyType
from typing import Any


class Topic(StrEnum):
    """Topics used to categorize and search advice."""

    GROWTH = "growth"  # user acquisition, virality, growth loops
    PRICING = "pricing"  # pricing strategy, monetization, packaging
    PRODUCT_MARKET_FIT = "product-market-fit"  # PMF signals, validation, pivots
    ROADMAP = "roadmap"  # prioritization, planning, saying no
    METRICS = "metrics"  # KPIs, measurement, north star metrics
    HIRING = "hiring"  # team building, interviews
    LEADERSHIP = "leadership"  # management, communication, influence
    STRATEGY = "strategy"  # vision, positioning, competition
    ENTERPRISE = "enterprise"  # B2B sales, enterprise features
    CONSUMER = "consumer"  # B2C, marketplaces, social
    AI = "ai"  # AI products, LLMs, AI strategy
    EXECUTION = "execution"  # shipping, speed, iteration
    CULTURE = "culture"  # company culture, values, remote work
    FUNDRAISING = "fundraising"  # raising money, investors, pitching
    DESIGN = "design"  # product design, UX, user research
    ANALYTICS = "analytics"  # data, experimentation, A/B testing


TOPICS: tuple[Topic, ...] = tuple(Topic)
TOPIC_VALUES: frozenset[str] = frozenset(t.value for t in Topic)

_ALIASES: dict[str, Topic] = {
    "pmf": Topic.PRODUCT_MARKET_FIT,
    "product market fit": Topic.PRODUCT_MARKET_FIT,
    "kpis": Topic.METRICS,
    "okrs": Topic.METRICS,
    "north star": Topic.METRICS,
    "team": Topic.HIRING,
    "recruiting": Topic.HIRING,
    "management": Topic.LEADERSHIP,
    "prioritization": Topic.ROADMAP,
    "planning": Topic.ROADMAP,
    "monetization": Topic.PRICING,
    "b2b": Topic.ENTERPRISE,
    "b2c": Topic.CONSUMER,
    "marketplace": Topic.CONSUMER,
    "ux": Topic.DESIGN,
    "user research": Topic.DESIGN,
    "experiments": Topic.ANALYTICS,
    "a/b testing": Topic.ANALYTICS,
    "shipping": Topic.EXECUTION,
    "speed": Topic.EXECUTION,
    "artificial intelligence": Topic.AI,
    "llm": Topic.AI,
    "llms": Topic.AI,
    "machine learning": Topic.AI,
    "fundraise": Topic.FUNDRAISING,
    "investors": Topic.FUNDRAISING,
    "vc": Topic.FUNDRAISING,
    "virality": Topic.GROWTH,
    "acquisition": Topic.GROWTH,
    "retention": Topic.GROWTH,
}

_WHITESPACE_RE = re.compile(r"\s+")


def _canonical_key(value: str) -> str:
    return _WHITESPACE_RE.sub("-", value.strip().lower())


# Lookups happen after whitespace is collapsed to hyphens, so multi-word
# aliases are keyed by their hyphenated form.
TOPIC_ALIASES: MappingProxyType[str, Topic] = MappingProxyType(
    {_canonical_key(alias): topic for alias, topic in _ALIASES.items()}
)


def normalize_topic(value: Any) -> Topic | None:
    """Map a free-form topic string onto the taxonomy.

    Lowercases, trims, and collapses internal whitespace to single hyphens,
    then tries an exact taxonomy match followed by the alias table.

    Args:
        value: Arbitrary user-supplied topic string.

    Returns:
        The canonical :class:`Topic`, or ``None`` when nothing matches.
    """
    if not isinstance(value, str):
        return None

    key = _canonical_key(value)
    if key in TOPIC_VALUES:
        return Topic(key)
    return TOPIC_ALIASES.get(key)


def filter_topics(values: list[Any]) -> list[Topic]:
    """Keep only exact taxonomy members, dropping duplicates but keeping order."""
    kept: list[Topic] = []
    for value in values:
        if isinstance(value, str) and value in TOPIC_VALUES and value not in kept:
            kept.append(Topic(value))
    return kept
