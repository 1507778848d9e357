"""Effective capacity resolution for warehouse cells.

A cluster's defaults are layered with a list of cell overrides. Overrides
are evaluated as an ordered rule list: the most recently created override
comes first (declaration order breaks ties, later wins), and the first
rule whose scope contains the queried cell decides the value.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable, Iterable

from ..entities import CellOverride, ClusterConfig
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

FALLBACK_ROW_COUNT = 9
FALLBACK_LEVEL_CAPACITY = 3
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _precedence_key(override: CellOverride) -> tuple[datetime, int]:
    # Naive timestamps are taken as UTC so they order against aware ones.
    created = override.created_at
    if created is None:
        created = _EPOCH
    elif created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    else:
        created = created.astimezone(timezone.utc)
    return (created, override.sequence)


class ConfigResolver:
    """Merges cluster defaults with overrides into effective capacities.

    Args:
        clusters: Cluster configurations. Inactive ones are ignored.
        overrides: Cell overrides referencing clusters by config id.
        strict: When True, asking about a cluster without configuration
            raises ConfigurationError. When False the fallback constants
            are used and a warning is logged.
    """

    def __init__(
        self,
        clusters: Iterable[ClusterConfig],
        overrides: Iterable[CellOverride] = (),
        strict: bool = True,
    ) -> None:
        self.strict = strict
        self._clusters: dict[str, ClusterConfig] = {}
        config_ids: dict[str, str] = {}
        inactive_ids: set[str] = set()
        for config in clusters:
            if not config.is_active:
                inactive_ids.add(config.id)
                continue
            self._clusters[config.cluster] = config
            config_ids[config.id] = config.cluster

        grouped: dict[str, list[CellOverride]] = defaultdict(list)
        for override in overrides:
            if override.cluster_config_id in inactive_ids:
                continue
            cluster = config_ids.get(override.cluster_config_id)
            if cluster is None:
                raise ConfigurationError(
                    f"Override references unknown cluster config "
                    f"'{override.cluster_config_id}'"
                )
            grouped[cluster].append(override)

        self._rules: dict[str, tuple[CellOverride, ...]] = {
            cluster: tuple(sorted(items, key=_precedence_key, reverse=True))
            for cluster, items in grouped.items()
        }

    @property
    def clusters(self) -> list[str]:
        """Active cluster letters in sorted order."""
        return sorted(self._clusters)

    def cluster_config(self, cluster: str) -> ClusterConfig | None:
        return self._clusters.get(cluster)

    def rules(self, cluster: str) -> tuple[CellOverride, ...]:
        """Overrides of a cluster in evaluation order."""
        return self._rules.get(cluster, ())

    def _first_rule(
        self, cluster: str, matches: Callable[[CellOverride], bool]
    ) -> CellOverride | None:
        for rule in self.rules(cluster):
            if matches(rule):
                return rule
        return None

    def _require(self, cluster: str) -> ClusterConfig | None:
        config = self._clusters.get(cluster)
        if config is None:
            if self.strict:
                raise ConfigurationError(f"No configuration for cluster '{cluster}'")
            logger.warning(
                f"No configuration for cluster '{cluster}', using fallback capacity"
            )
        return config

    def lane_count(self, cluster: str) -> int:
        config = self._require(cluster)
        return config.default_lane_count if config else 0

    def effective_row_count(self, cluster: str, lane: int) -> int:
        """Number of rows in a lane after overrides."""
        config = self._require(cluster)
        rule = self._first_rule(
            cluster,
            lambda o: not o.is_disabled
            and o.custom_row_count is not None
            and o.covers_lane(lane),
        )
        if rule is not None:
            assert rule.custom_row_count is not None
            return rule.custom_row_count
        return config.default_row_count if config else FALLBACK_ROW_COUNT

    def effective_level_capacity(self, cluster: str, lane: int, row: int) -> int:
        """Number of stackable levels at a row after overrides."""
        config = self._require(cluster)
        rule = self._first_rule(
            cluster,
            lambda o: not o.is_disabled
            and o.custom_level_capacity is not None
            and o.covers_cell(lane, row),
        )
        if rule is not None:
            assert rule.custom_level_capacity is not None
            return rule.custom_level_capacity
        return config.default_level_capacity if config else FALLBACK_LEVEL_CAPACITY

    def is_disabled(self, cluster: str, lane: int, row: int) -> bool:
        """Single exclusion predicate shared by every search mode."""
        return any(
            rule.is_disabled and rule.covers_cell(lane, row)
            for rule in self.rules(cluster)
        )

    def is_transit_lane(self, cluster: str, lane: int) -> bool:
        return any(
            rule.is_transit_area and rule.covers_lane(lane)
            for rule in self.rules(cluster)
        )

    def is_transit_cell(self, cluster: str, lane: int, row: int) -> bool:
        return any(
            rule.is_transit_area and rule.covers_cell(lane, row)
            for rule in self.rules(cluster)
        )

    def transit_overrides(self) -> list[tuple[str, CellOverride]]:
        """All transit overrides as (cluster, override), in search order.

        Ordered by cluster, then lane start, then row start, then creation.
        """
        found = [
            (cluster, rule)
            for cluster, rules in self._rules.items()
            for rule in rules
            if rule.is_transit_area and not rule.is_disabled
        ]
        return sorted(
            found,
            key=lambda item: (
                item[0],
                item[1].lane_range.start,
                item[1].row_range.start if item[1].row_range else 0,
                _precedence_key(item[1]),
            ),
        )
