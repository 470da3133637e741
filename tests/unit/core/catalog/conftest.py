import pytest

from sitestore.core.catalog.icons import IconRegistry
from sitestore.core.catalog.sections import SectionRegistry
from sitestore.core.catalog.themes import ThemeRegistry
from sitestore.core.storage.optimized_storage import OptimizedStorage


@pytest.fixture
def storage_icons(storage: OptimizedStorage) -> IconRegistry:
    return storage.icons


@pytest.fixture
def storage_sections(storage: OptimizedStorage) -> SectionRegistry:
    return storage.sections


@pytest.fixture
def storage_themes(storage: OptimizedStorage) -> ThemeRegistry:
    return storage.themes
