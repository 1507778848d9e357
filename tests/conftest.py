"""Pytest configuration and shared fixtures for slotting tests."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from slotting.domain import ClusterConfig, IntRange, Product, ProductHome

if TYPE_CHECKING:
    from slotting.application.config import WarehouseConfiguration
    from slotting.application.factory import ServiceFactory


FIXTURES_PATH = Path(__file__).parent / "fixtures" / "configs"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Domain building blocks
# =============================================================================


@pytest.fixture
def cluster_a() -> ClusterConfig:
    """Cluster A: 10 lanes x 9 rows x 3 levels."""
    return ClusterConfig(
        cluster="A", default_lane_count=10, default_row_count=9, default_level_capacity=3
    )


@pytest.fixture
def cluster_c() -> ClusterConfig:
    """Cluster C: 11 lanes x 9 rows x 3 levels."""
    return ClusterConfig(
        cluster="C", default_lane_count=11, default_row_count=9, default_level_capacity=3
    )


@pytest.fixture
def product() -> Product:
    return Product(id="p-1", code="SKU-1", cartons_per_pallet=20, default_cluster="A")


@pytest.fixture
def home_a(product: Product) -> ProductHome:
    """Home of SKU-1 in cluster A, lanes 1-2, all rows, 3 per location."""
    return ProductHome(
        product_id=product.id,
        cluster="A",
        lane_range=IntRange(1, 2),
        row_range=IntRange(1, 9),
        max_pallet_per_location=3,
    )


# =============================================================================
# Configuration and factory
# =============================================================================


@pytest.fixture
def fixtures_path() -> Path:
    return FIXTURES_PATH


@pytest.fixture
def warehouse_config() -> "WarehouseConfiguration":
    """The sample warehouse WH-01 loaded from its fixture file."""
    from slotting.application.config import load_config

    return load_config(FIXTURES_PATH / "warehouse.json")


@pytest.fixture
def factory(warehouse_config: "WarehouseConfiguration") -> "ServiceFactory":
    """A fresh factory, with its own in-memory stores, for WH-01."""
    from slotting.application.factory import ServiceFactory

    return ServiceFactory(config=warehouse_config)


@pytest.fixture(autouse=True)
def reset_default_factory():
    """Keep the process-wide default factory from leaking between tests."""
    from slotting.application.factory import reset_factory
    from slotting.web.dependencies import get_service_factory

    yield
    reset_factory()
    get_service_factory.cache_clear()
