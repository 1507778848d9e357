"""Product home lookup in search order."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from ..entities import Product, ProductHome
from .config_resolver import ConfigResolver


class HomeRegistry:
    """Returns configured home zones of a product in priority order.

    Homes in the product's declared default cluster come first, then lower
    ``priority`` values, then creation order. The sort is stable and keyed
    only on those fields, so repeated calls give the same order regardless
    of insertion order.
    """

    def __init__(
        self, homes: Iterable[ProductHome], products: Iterable[Product] = ()
    ) -> None:
        self._defaults = {product.id: product.default_cluster for product in products}
        self._homes: dict[str, list[ProductHome]] = defaultdict(list)
        for home in homes:
            if home.is_active:
                self._homes[home.product_id].append(home)

    def homes_for(
        self, product_id: str, cluster: str | None = None
    ) -> list[ProductHome]:
        """Ordered homes of a product, optionally restricted to one cluster."""
        default_cluster = self._defaults.get(product_id)
        homes = [
            home
            for home in self._homes.get(product_id, [])
            if cluster is None or home.cluster == cluster
        ]
        return sorted(
            homes,
            key=lambda home: (
                home.cluster != default_cluster,
                home.priority,
                home.sequence,
            ),
        )

    def clusters_for(self, product_id: str) -> list[str]:
        """Distinct clusters in which the product has a home."""
        return sorted({home.cluster for home in self._homes.get(product_id, [])})

    @staticmethod
    def cell_cap(
        resolver: ConfigResolver, home: ProductHome, lane: int, row: int
    ) -> int:
        """Levels usable by the product at a row of this home."""
        return min(
            resolver.effective_level_capacity(home.cluster, lane, row),
            home.max_pallet_per_location,
        )
