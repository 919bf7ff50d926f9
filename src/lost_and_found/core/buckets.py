"""Category buckets and trending tags for browsing."""

from collections import Counter
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Sequence

from lost_and_found.core.entities import FilterBucket, Item, TrendingTag

PREDEFINED_BUCKETS: tuple[FilterBucket, ...] = (
    FilterBucket("ID & Cards", "🆔", ("wallet", "documents", "cards")),
    FilterBucket("Keys & Access", "🔑", ("keys", "keychain", "access")),
    FilterBucket("Electronics", "📱", ("phone", "laptop", "electronics", "headphones", "charger")),
    FilterBucket("Bottles & Drinks", "🍼", ("bottle", "thermos", "cup", "mug")),
    FilterBucket("Bags & Backpacks", "🎒", ("bag", "backpack", "purse", "luggage")),
    FilterBucket("Accessories", "👜", ("sunglasses", "watch", "jewelry", "accessories")),
    FilterBucket("Clothing", "👕", ("jacket", "shirt", "hat", "clothing")),
    FilterBucket("Other Items", "❓", ("other", "misc", "unknown")),
)

RECENT_DAYS = 7
TRENDING_UP_RATIO = 0.3
TRENDING_DOWN_RATIO = 0.1


def _in_bucket(item: Item, bucket: FilterBucket) -> bool:
    category = item.category.lower()
    tags = [tag.lower() for tag in item.tags]
    return any(
        word in category or any(word in tag for tag in tags)
        for word in (c.lower() for c in bucket.categories)
    )


def bucket_counts(
    items: Sequence[Item], buckets: Sequence[FilterBucket] = PREDEFINED_BUCKETS
) -> list[FilterBucket]:
    """Count items per bucket. An item may fall into several buckets."""
    return [
        replace(bucket, count=sum(1 for item in items if _in_bucket(item, bucket)))
        for bucket in buckets
    ]


def trending_tags(items: Sequence[Item], now: datetime, limit: int = 12) -> list[TrendingTag]:
    """Most used tags with a trend from the share posted in the last week."""
    counts: Counter[str] = Counter()
    recent: Counter[str] = Counter()
    week_ago = now - timedelta(days=RECENT_DAYS)

    for item in items:
        counts.update(item.tags)
        if item.created_at is not None and item.created_at >= week_ago:
            recent.update(item.tags)

    tags = []
    for name, count in counts.items():
        recent_count = recent[name]
        if recent_count > count * TRENDING_UP_RATIO:
            trend = "up"
        elif recent_count < count * TRENDING_DOWN_RATIO:
            trend = "down"
        else:
            trend = "stable"
        tags.append(TrendingTag(name=name, count=count, trend=trend))

    tags.sort(key=lambda t: t.count, reverse=True)
    return tags[:limit]
