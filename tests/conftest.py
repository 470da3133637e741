"""Pytest configuration and fixtures."""

import pytest

from sitestore.core.config import SiteStoreConfig
from sitestore.core.context import SiteStoreContext
from sitestore.core.migration.transform import MigrationTransform
from sitestore.core.persistence import JsonDocumentStore
from sitestore.core.storage.optimized_storage import OptimizedStorage
from sitestore.core.storage_keys import StorageKeys
from sitestore.integrations.kv_store.fake import FakeKeyValueStore
from sitestore.integrations.time.fake import FakeTime


@pytest.fixture
def fake_kv_store() -> FakeKeyValueStore:
    """Create a fresh, empty FakeKeyValueStore."""
    return FakeKeyValueStore()


@pytest.fixture
def fake_time() -> FakeTime:
    """Create a FakeTime at its default instant."""
    return FakeTime()


@pytest.fixture
def config() -> SiteStoreConfig:
    """Default configuration."""
    return SiteStoreConfig()


@pytest.fixture
def keys() -> StorageKeys:
    return StorageKeys()


@pytest.fixture
def documents(fake_kv_store: FakeKeyValueStore) -> JsonDocumentStore:
    return JsonDocumentStore(fake_kv_store)


@pytest.fixture
def site_context(
    fake_kv_store: FakeKeyValueStore,
    fake_time: FakeTime,
    config: SiteStoreConfig,
) -> SiteStoreContext:
    """Create an initialized SiteStoreContext over fakes."""
    return SiteStoreContext.for_test(config=config, kv_store=fake_kv_store, time=fake_time)


@pytest.fixture
def storage(site_context: SiteStoreContext) -> OptimizedStorage:
    return site_context.storage


@pytest.fixture
def migration(site_context: SiteStoreContext) -> MigrationTransform:
    return site_context.migration
