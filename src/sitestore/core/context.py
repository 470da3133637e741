"""Application context with dependency injection."""

from dataclasses import dataclass

from sitestore.core.catalog.icons import IconRegistry
from sitestore.core.catalog.sections import SectionRegistry
from sitestore.core.catalog.themes import ThemeRegistry
from sitestore.core.config import ConfigOps, FilesystemConfigOps, SiteStoreConfig
from sitestore.core.migration.transform import MigrationTransform
from sitestore.core.persistence import JsonDocumentStore
from sitestore.core.storage.optimized_storage import OptimizedStorage
from sitestore.core.storage_keys import StorageKeys
from sitestore.integrations.kv_store.abc import KeyValueStore
from sitestore.integrations.kv_store.fake import FakeKeyValueStore
from sitestore.integrations.kv_store.real import FileKeyValueStore
from sitestore.integrations.time.abc import Time
from sitestore.integrations.time.fake import FakeTime
from sitestore.integrations.time.real import RealTime


@dataclass(frozen=True)
class SiteStoreContext:
    """Immutable context holding all dependencies for sitestore operations.

    Created at the entry point and passed to consumers; there are no
    module-level registry or storage singletons. The storage is initialized
    before the context is returned.
    """

    config: SiteStoreConfig
    kv_store: KeyValueStore
    time: Time
    storage: OptimizedStorage
    migration: MigrationTransform

    @staticmethod
    def build(config: SiteStoreConfig, kv_store: KeyValueStore, time: Time) -> "SiteStoreContext":
        """Wire registries, storage and migration over the given store and clock."""
        documents = JsonDocumentStore(kv_store)
        keys = StorageKeys(prefix=config.key_prefix)
        storage = OptimizedStorage(
            documents=documents,
            time=time,
            keys=keys,
            config=config,
            icons=IconRegistry(
                documents, time, custom_key=keys.custom_icons, usage_key=keys.icon_usage
            ),
            sections=SectionRegistry(
                documents, time, custom_key=keys.custom_sections, usage_key=keys.section_usage
            ),
            themes=ThemeRegistry(
                documents, time, custom_key=keys.custom_themes, usage_key=keys.theme_usage
            ),
        )
        storage.initialize()
        return SiteStoreContext(
            config=config,
            kv_store=kv_store,
            time=time,
            storage=storage,
            migration=MigrationTransform(storage, time, config),
        )

    @staticmethod
    def for_test(
        config: SiteStoreConfig | None = None,
        kv_store: KeyValueStore | None = None,
        time: Time | None = None,
    ) -> "SiteStoreContext":
        """Create test context with fakes for anything not provided.

        Args:
            config: Optional config. If None, uses defaults.
            kv_store: Optional store. If None, creates empty FakeKeyValueStore.
            time: Optional clock. If None, creates FakeTime at its default instant.

        Returns:
            Initialized SiteStoreContext

        Example:
            >>> store = FakeKeyValueStore()
            >>> ctx = SiteStoreContext.for_test(kv_store=store)
            >>> ctx.storage.add_to_recently_used_icons("Star")
        """
        return SiteStoreContext.build(
            config if config is not None else SiteStoreConfig(),
            kv_store if kv_store is not None else FakeKeyValueStore(),
            time if time is not None else FakeTime(),
        )


def create_context(config_ops: ConfigOps | None = None) -> SiteStoreContext:
    """Create production context with real implementations.

    Raises:
        ValueError: If the config file is malformed
    """
    ops = config_ops if config_ops is not None else FilesystemConfigOps()
    config = ops.load()
    return SiteStoreContext.build(config, FileKeyValueStore(config.store_dir), RealTime())
