from typing import Dict, Iterable, List

from betnorm.config.settings import settings
from betnorm.models.queue import GroupedQueueItem, SampleContext, UnresolvedItem
from betnorm.normalization.lookup_key import to_lookup_key
from betnorm.normalization.registry import sport_value

UNKNOWN_SPORT = "Unknown"


def group_key(item: UnresolvedItem) -> str:
    """entityType::sport::lookupKey(rawValue). Known sports are matched case-insensitively."""
    return "::".join(
        [item.entity_type.value, sport_value(item.sport) or UNKNOWN_SPORT, to_lookup_key(item.raw_value)]
    )


def group_queue_items(
    items: Iterable[UnresolvedItem], max_samples: int = settings.max_sample_contexts
) -> List[GroupedQueueItem]:
    """Merges queue items for batch review, most recently seen group first."""
    groups: Dict[str, GroupedQueueItem] = {}

    for item in items:
        key = group_key(item)
        sample = SampleContext(book=item.book, market=item.market, bet_id=item.bet_id)
        group = groups.get(key)

        if group is None:
            groups[key] = GroupedQueueItem(
                group_key=key,
                raw_value=item.raw_value,
                entity_type=item.entity_type,
                sport=sport_value(item.sport),
                count=1,
                last_seen_at=item.encountered_at,
                sample_contexts=[sample],
                item_ids={item.id},
            )
            continue

        group.count += 1
        group.item_ids.add(item.id)
        if item.encountered_at > group.last_seen_at:
            group.last_seen_at = item.encountered_at
        if len(group.sample_contexts) < max_samples and not any(
            s.book == sample.book and s.market == sample.market for s in group.sample_contexts
        ):
            group.sample_contexts.append(sample)

    return sorted(groups.values(), key=lambda g: g.last_seen_at, reverse=True)
