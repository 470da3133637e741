"""Tests for OptimizedStorage."""

import json
import logging
from datetime import timedelta

import pytest

from sitestore.core.catalog.types import IconEntity
from sitestore.core.codec import format_timestamp
from sitestore.core.config import SiteStoreConfig
from sitestore.core.context import SiteStoreContext
from sitestore.core.storage.content import icon_ref
from sitestore.core.storage.optimized_storage import OptimizedStorage
from sitestore.core.storage.types import (
    DEFAULT_PREFERENCES,
    SectionInstance,
    StoredProject,
    UserProfile,
)
from sitestore.integrations.kv_store.fake import FakeKeyValueStore
from sitestore.integrations.time.fake import FakeTime


def _project(project_id: str = "p1", **overrides: object) -> StoredProject:
    fields: dict[str, object] = {
        "id": project_id,
        "name": f"Project {project_id}",
        "website_url": f"site-{project_id}",
        "theme_id": "modern-blue",
    }
    fields.update(overrides)
    return StoredProject.model_validate(fields)


def _instance(section_id: str, data: dict | None = None, **overrides: object) -> SectionInstance:
    return SectionInstance(
        id=f"inst-{section_id}", section_id=section_id, data=data or {}, **overrides
    )


def _ids(entities: list) -> list[str]:
    return [entity.id for entity in entities]


class TestInitialize:
    def test_reconciles_persisted_usage_into_registries(self) -> None:
        store = FakeKeyValueStore(
            values={
                "icon_usage": json.dumps({"Star": 7, "Ghost": 2}),
                "section_usage": json.dumps({"hero-modern": {"usage": 4, "downloads": 2200}}),
                "theme_usage": json.dumps({"dark-elegant": 3}),
            }
        )

        storage = SiteStoreContext.for_test(kv_store=store).storage

        assert storage.icons.get("Star").usage == 7
        assert storage.sections.get("hero-modern").usage == 4
        assert storage.sections.get("hero-modern").downloads == 2200
        assert storage.themes.get("dark-elegant").usage == 3
        assert store.write_log == []

    def test_malformed_usage_is_ignored(self) -> None:
        store = FakeKeyValueStore(values={"icon_usage": "{oops"})

        storage = SiteStoreContext.for_test(kv_store=store).storage

        assert storage.icons.get("Star").usage == 0


class TestProjects:
    def test_empty_store_has_no_projects(self, storage: OptimizedStorage) -> None:
        assert storage.get_all_projects() == []
        assert storage.get_project("p1") is None

    def test_insert_fills_timestamps(self, storage: OptimizedStorage, fake_time: FakeTime) -> None:
        stored = storage.save_project(_project("p1"))

        assert stored.created_at == fake_time.now()
        assert stored.updated_at == fake_time.now()
        assert storage.get_project("p1") == stored

    def test_update_replaces_in_place_and_stamps_updated_at(
        self, storage: OptimizedStorage, fake_time: FakeTime
    ) -> None:
        created = storage.save_project(_project("p1")).created_at
        storage.save_project(_project("p2"))
        fake_time.advance(minutes=10)

        storage.save_project(_project("p1", name="Renamed"))

        projects = storage.get_all_projects()
        assert _ids(projects) == ["p1", "p2"]
        assert projects[0].name == "Renamed"
        assert projects[0].updated_at == fake_time.now()
        assert projects[0].created_at == created

    def test_delete(self, storage: OptimizedStorage) -> None:
        storage.save_project(_project("p1"))
        storage.save_project(_project("p2"))

        assert storage.delete_project("p1") is True
        assert storage.delete_project("p1") is False

        assert _ids(storage.get_all_projects()) == ["p2"]

    def test_invalid_stored_project_is_skipped(self, fake_kv_store: FakeKeyValueStore) -> None:
        fake_kv_store.set("projects", json.dumps([{"id": "broken"}, {"id": "ok", "name": "Ok"}]))
        storage = SiteStoreContext.for_test(kv_store=fake_kv_store).storage

        assert _ids(storage.get_all_projects()) == ["ok"]

    def test_date_like_strings_stay_text(self, storage: OptimizedStorage) -> None:
        storage.save_project(
            _project(
                "p1",
                name="2024-01-01T00:00:00",
                description="2024-06-30T09:15:00.000Z launch",
                sections=[_instance("hero-modern", {"title": "2024-01-01T00:00:00Z"})],
            )
        )
        storage.save_project(_project("p2"))

        assert _ids(storage.get_all_projects()) == ["p1", "p2"]
        project = storage.get_project("p1")
        assert project.name == "2024-01-01T00:00:00"
        assert project.description == "2024-06-30T09:15:00.000Z launch"
        assert project.sections[0].data == {"title": "2024-01-01T00:00:00Z"}

    def test_bare_iso_timestamps_parse_as_aware_datetimes(
        self, fake_kv_store: FakeKeyValueStore
    ) -> None:
        fake_kv_store.set(
            "projects",
            json.dumps([{"id": "p1", "name": "Old", "createdAt": "2023-05-01T10:00:00"}]),
        )
        storage = SiteStoreContext.for_test(kv_store=fake_kv_store).storage

        created_at = storage.get_project("p1").created_at
        assert format_timestamp(created_at) == "2023-05-01T10:00:00.000Z"
        assert created_at.tzinfo is not None

    def test_writes_keep_unreadable_entries(
        self, storage: OptimizedStorage, fake_kv_store: FakeKeyValueStore
    ) -> None:
        broken = {"id": "broken", "sections": "not a list"}
        fake_kv_store.set("projects", json.dumps([broken, "junk"]))

        storage.save_project(_project("p1"))
        storage.save_project(_project("p2"))
        assert storage.update_project_theme("p1", "dark-elegant") is True
        assert storage.delete_project("p2") is True

        stored = json.loads(fake_kv_store.values["projects"])
        assert stored[:2] == [broken, "junk"]
        assert [entry["id"] for entry in stored[2:]] == ["p1"]
        assert _ids(storage.get_all_projects()) == ["p1"]

    def test_save_replaces_unreadable_entry_with_same_id(
        self, storage: OptimizedStorage, fake_kv_store: FakeKeyValueStore
    ) -> None:
        fake_kv_store.set("projects", json.dumps([{"id": "p1"}, {"id": "other"}]))

        assert storage.update_project_theme("p1", "dark-elegant") is False
        storage.save_project(_project("p1"))

        stored = json.loads(fake_kv_store.values["projects"])
        assert [entry["id"] for entry in stored] == ["p1", "other"]
        assert stored[0]["name"] == "Project p1"
        assert stored[1] == {"id": "other"}

    def test_delete_removes_unreadable_entry_by_id(
        self, storage: OptimizedStorage, fake_kv_store: FakeKeyValueStore
    ) -> None:
        fake_kv_store.set("projects", json.dumps([{"id": "broken"}, {"id": "other"}]))

        assert storage.delete_project("broken") is True

        assert json.loads(fake_kv_store.values["projects"]) == [{"id": "other"}]

    def test_save_tracks_sections_and_icons(self, storage: OptimizedStorage) -> None:
        project = _project(
            "P1", sections=[_instance("hero-modern", {"primaryIconId": "Star"})]
        )

        storage.save_project(project)

        assert "hero-modern" in _ids(storage.get_recently_used_sections())
        assert "Star" in _ids(storage.get_recently_used_icons())
        assert storage.sections.get("hero-modern").usage == 1
        assert storage.get_section_selections() == {"hero-modern": 1}
        assert storage.get_icon_selections() == {"Star": 1}

    def test_save_tracks_nested_tagged_and_custom_icons(self, storage: OptimizedStorage) -> None:
        data = {
            "features": [{"iconId": "Lock"}, {"badge": icon_ref("Trophy")}],
            "iconColor": "Sun",
        }
        project = _project(
            sections=[_instance("features-list", data, custom_icons={"cta": "Rocket"})]
        )

        storage.save_project(project)

        settings = storage.get_user_settings()
        assert settings.recently_used_icons == ["Rocket", "Trophy", "Lock"]
        assert settings.recently_used_sections == ["features-list"]

    def test_update_project_theme(self, storage: OptimizedStorage, fake_time: FakeTime) -> None:
        storage.save_project(_project("p1", sections=[_instance("hero-modern")]))
        fake_time.advance(minutes=1)

        assert storage.update_project_theme("p1", "dark-elegant") is True
        assert storage.update_project_theme("missing", "dark-elegant") is False

        project = storage.get_project("p1")
        assert project.theme_id == "dark-elegant"
        assert project.updated_at == fake_time.now()
        # Changing the theme does not count as another use of the sections
        assert storage.sections.get("hero-modern").usage == 1


class TestRecentlyUsed:
    @pytest.mark.parametrize(
        "sequence",
        [
            [f"icon-{n}" for n in range(30)],
            ["Star", "Heart", "Star", "Home", "Heart", "Star"],
            [f"icon-{n % 7}" for n in range(50)],
            [f"icon-{(n * 13) % 23}" for n in range(60)],
        ],
    )
    def test_bounded_unique_and_most_recent_first(
        self, storage: OptimizedStorage, sequence: list[str]
    ) -> None:
        for icon_id in sequence:
            storage.add_to_recently_used_icons(icon_id)

        recent = storage.get_user_settings().recently_used_icons
        assert len(recent) <= 20
        assert len(recent) == len(set(recent))
        assert recent[0] == sequence[-1]

    def test_re_adding_moves_to_front(self, storage: OptimizedStorage) -> None:
        for icon_id in ["Star", "Heart", "Home"]:
            storage.add_to_recently_used_icons(icon_id)

        storage.add_to_recently_used_icons("Star")

        assert storage.get_user_settings().recently_used_icons == ["Star", "Home", "Heart"]

    def test_oldest_entry_falls_off(self, storage: OptimizedStorage) -> None:
        for n in range(21):
            storage.add_to_recently_used_sections(f"section-{n}")

        recent = storage.get_user_settings().recently_used_sections
        assert recent[0] == "section-20"
        assert recent[-1] == "section-1"

    def test_configured_limit(self, fake_kv_store: FakeKeyValueStore) -> None:
        config = SiteStoreConfig(recent_limit=3)
        storage = SiteStoreContext.for_test(config=config, kv_store=fake_kv_store).storage

        for icon_id in ["Star", "Heart", "Home", "Mail"]:
            storage.add_to_recently_used_icons(icon_id)

        assert storage.get_user_settings().recently_used_icons == ["Mail", "Home", "Heart"]

    def test_dangling_ids_are_filtered(self, storage: OptimizedStorage) -> None:
        storage.add_to_recently_used_icons("Star")
        storage.add_to_recently_used_icons("RemovedIcon")
        storage.add_to_recently_used_sections("gone-section")

        assert _ids(storage.get_recently_used_icons()) == ["Star"]
        assert storage.get_recently_used_sections() == []
        assert storage.get_user_settings().recently_used_icons == ["RemovedIcon", "Star"]

    def test_add_counts_usage_and_selection(self, storage: OptimizedStorage) -> None:
        storage.add_to_recently_used_icons("Star")
        storage.add_to_recently_used_icons("Star")

        assert storage.icons.get("Star").usage == 2
        assert storage.get_icon_selections() == {"Star": 2}


class TestFavorites:
    def test_toggle_twice_restores_favorites(self, storage: OptimizedStorage) -> None:
        storage.toggle_favorite_icon("Heart")
        before = storage.get_user_settings().favorite_icons

        assert storage.toggle_favorite_icon("Star") is True
        assert storage.toggle_favorite_icon("Star") is False

        assert storage.get_user_settings().favorite_icons == before

    def test_favorites_keep_added_order(self, storage: OptimizedStorage) -> None:
        for section_id in ["contact-form", "hero-modern", "about-simple"]:
            storage.toggle_favorite_section(section_id)

        assert _ids(storage.get_favorite_sections()) == [
            "contact-form",
            "hero-modern",
            "about-simple",
        ]

    def test_dangling_favorites_are_filtered(self, storage: OptimizedStorage) -> None:
        storage.icons.add_custom(IconEntity(id="Logo", name="Logo", category="general"))
        storage.toggle_favorite_icon("Logo")
        storage.toggle_favorite_icon("Star")

        storage.icons.delete("Logo")

        assert _ids(storage.get_favorite_icons()) == ["Star"]


class TestThemeSelection:
    def test_defaults_to_configured_theme(self, storage: OptimizedStorage) -> None:
        assert storage.get_selected_theme().id == "modern-blue"

    def test_set_selected_theme(self, storage: OptimizedStorage) -> None:
        storage.set_selected_theme("dark-elegant")
        storage.set_selected_theme("dark-elegant")

        assert storage.get_selected_theme().id == "dark-elegant"
        assert storage.get_theme_selections() == {"dark-elegant": 2}
        assert storage.themes.get("dark-elegant").usage == 2

    def test_dangling_selection_resolves_to_none(self, storage: OptimizedStorage) -> None:
        storage.set_selected_theme("retired-theme")

        assert storage.get_selected_theme() is None
        assert storage.get_user_settings().selected_theme_id == "retired-theme"


class TestUserSettings:
    def test_defaults(self, storage: OptimizedStorage) -> None:
        settings = storage.get_user_settings()

        assert settings.selected_theme_id == "modern-blue"
        assert settings.preferences == DEFAULT_PREFERENCES
        assert settings.favorite_icons == []

    def test_stored_fields_shallow_merge_over_defaults(
        self, fake_kv_store: FakeKeyValueStore
    ) -> None:
        fake_kv_store.set(
            "user_settings",
            json.dumps({"selectedThemeId": "minimal-clean", "preferences": {"language": "uz"}}),
        )
        storage = SiteStoreContext.for_test(kv_store=fake_kv_store).storage

        settings = storage.get_user_settings()

        assert settings.selected_theme_id == "minimal-clean"
        assert settings.recently_used_icons == []
        # Shallow merge: a stored preferences map replaces the default one
        assert settings.preferences == {"language": "uz"}

    def test_malformed_settings_read_as_defaults(self, fake_kv_store: FakeKeyValueStore) -> None:
        fake_kv_store.set("user_settings", "{nope")
        storage = SiteStoreContext.for_test(kv_store=fake_kv_store).storage

        assert storage.get_user_settings().selected_theme_id == "modern-blue"

    def test_profile_round_trip(self, storage: OptimizedStorage) -> None:
        assert storage.get_user_profile() is None
        profile = UserProfile(id="u1", email="aziz@example.uz", name="Aziz")

        assert storage.save_user_profile(profile)

        assert storage.get_user_profile() == profile


class TestCache:
    def test_set_then_get(self, storage: OptimizedStorage) -> None:
        storage.set_cache("templates", {"count": 3}, ttl_minutes=5)

        assert storage.get_cache("templates") == {"count": 3}

    def test_missing_key(self, storage: OptimizedStorage) -> None:
        assert storage.get_cache("nothing") is None

    def test_expired_entry_is_evicted_on_read(
        self, storage: OptimizedStorage, fake_time: FakeTime
    ) -> None:
        storage.set_cache("templates", ["a"], ttl_minutes=5)
        storage.set_cache("other", ["b"], ttl_minutes=60)
        fake_time.advance(minutes=5, seconds=1)

        assert storage.get_cache("templates") is None
        assert storage.cache_keys() == ["other"]

    def test_entry_expires_once_ttl_has_elapsed(
        self, storage: OptimizedStorage, fake_time: FakeTime
    ) -> None:
        storage.set_cache("templates", ["a"], ttl_minutes=5)
        fake_time.advance(minutes=4, seconds=59)
        assert storage.get_cache("templates") == ["a"]

        fake_time.advance(seconds=1)

        assert storage.get_cache("templates") is None
        assert storage.cache_keys() == []

    def test_expired_entries_stay_until_read(
        self, storage: OptimizedStorage, fake_time: FakeTime
    ) -> None:
        storage.set_cache("templates", ["a"], ttl_minutes=1)
        fake_time.advance(minutes=30)

        assert storage.cache_keys() == ["templates"]

    def test_default_ttl_from_config(self, fake_kv_store: FakeKeyValueStore) -> None:
        time = FakeTime()
        config = SiteStoreConfig(default_cache_ttl_minutes=2)
        storage = SiteStoreContext.for_test(
            config=config, kv_store=fake_kv_store, time=time
        ).storage

        storage.set_cache("k", 1)
        time.advance(minutes=2, seconds=1)

        assert storage.get_cache("k") is None

    def test_entry_records_expiry_and_created(
        self, storage: OptimizedStorage, fake_kv_store: FakeKeyValueStore, fake_time: FakeTime
    ) -> None:
        storage.set_cache("k", "v", ttl_minutes=10)

        raw = json.loads(fake_kv_store.get("cache"))["k"]
        expected_expiry = fake_time.now() + timedelta(minutes=10)
        assert raw["expiry"] == {
            "__type": "Date",
            "value": format_timestamp(expected_expiry),
        }
        assert raw["created"]["__type"] == "Date"

    def test_clear_cache(self, storage: OptimizedStorage) -> None:
        storage.set_cache("a", 1)
        storage.set_cache("b", 2)

        storage.clear_cache()

        assert storage.cache_keys() == []
        assert storage.get_cache("a") is None


class TestAnalytics:
    def test_empty_analytics(self, storage: OptimizedStorage) -> None:
        analytics = storage.get_usage_analytics()

        assert analytics.total_projects == 0
        assert analytics.total_sections == 0
        assert analytics.most_used_theme == "modern-blue"
        assert analytics.most_used_icons == []
        assert analytics.most_used_sections == []
        assert analytics.storage_usage == 0

    def test_counts_and_rankings(self, storage: OptimizedStorage) -> None:
        storage.save_project(
            _project("p1", sections=[_instance("hero-modern"), _instance("contact-form")])
        )
        storage.save_project(_project("p2", sections=[_instance("hero-modern")]))
        storage.set_selected_theme("minimal-clean")
        for icon_id in ["Star", "Heart", "Heart"]:
            storage.add_to_recently_used_icons(icon_id)

        analytics = storage.get_usage_analytics()

        assert analytics.total_projects == 2
        assert analytics.total_sections == 3
        assert analytics.most_used_theme == "minimal-clean"
        assert analytics.most_used_icons == ["Heart", "Star"]
        assert analytics.most_used_sections == ["hero-modern", "contact-form"]

    def test_top_lists_are_capped_at_ten(self, storage: OptimizedStorage) -> None:
        for n in range(12):
            storage.add_to_recently_used_icons(f"icon-{n}")

        assert len(storage.get_usage_analytics().most_used_icons) == 10

    def test_ties_keep_map_order(self, storage: OptimizedStorage) -> None:
        for icon_id in ["Mail", "Star", "Home"]:
            storage.add_to_recently_used_icons(icon_id)

        assert storage.get_usage_analytics().most_used_icons == ["Mail", "Star", "Home"]

    def test_storage_usage_sums_stored_bytes(
        self, storage: OptimizedStorage, fake_kv_store: FakeKeyValueStore
    ) -> None:
        storage.save_project(_project("p1"))

        expected = sum(
            len(fake_kv_store.get(key).encode("utf-8"))
            for key in storage.keys.storage_keys()
            if fake_kv_store.get(key)
        )
        assert storage.get_usage_analytics().storage_usage == expected > 0


class TestExportImport:
    def test_export_shape(self, storage: OptimizedStorage) -> None:
        storage.save_project(_project("p1"))

        document = json.loads(storage.export_data())

        assert set(document) == {
            "projects",
            "userSettings",
            "themeSelections",
            "iconSelections",
            "sectionSelections",
            "exportedAt",
            "version",
        }
        assert document["version"] == "2.0.0"
        assert document["exportedAt"]["__type"] == "Date"
        assert document["projects"][0]["createdAt"]["__type"] == "Date"

    def test_round_trip_into_cleared_store(self, storage: OptimizedStorage) -> None:
        storage.save_project(
            _project("p1", sections=[_instance("hero-modern", {"iconId": "Star"})])
        )
        storage.save_project(_project("p2", description="Second"))
        storage.toggle_favorite_icon("Heart")
        storage.set_selected_theme("dark-elegant")
        projects_before = storage.get_all_projects()
        settings_before = storage.get_user_settings()
        exported = storage.export_data()

        storage.clear_all_data()
        assert storage.get_all_projects() == []

        assert storage.import_data(exported) is True
        assert storage.get_all_projects() == projects_before
        assert storage.get_user_settings() == settings_before
        assert storage.get_theme_selections() == {"dark-elegant": 1}

    def test_import_accepts_legacy_bare_dates(self, storage: OptimizedStorage) -> None:
        legacy = json.dumps(
            {"projects": [{"id": "old", "name": "Old", "createdAt": "2023-05-01T10:00:00.000Z"}]}
        )

        assert storage.import_data(legacy) is True

        assert storage.get_project("old").created_at.year == 2023

    def test_partial_import_leaves_other_sections(self, storage: OptimizedStorage) -> None:
        storage.save_project(_project("p1"))
        storage.set_selected_theme("dark-elegant")

        assert storage.import_data(json.dumps({"iconSelections": {"Star": 9}})) is True

        assert _ids(storage.get_all_projects()) == ["p1"]
        assert storage.get_theme_selections() == {"dark-elegant": 1}
        assert storage.get_icon_selections() == {"Star": 9}

    @pytest.mark.parametrize(
        "document",
        [
            "{not json",
            "[1, 2]",
            json.dumps({"iconSelections": {"Star": 1}, "projects": [{"name": "no id"}]}),
            json.dumps({"userSettings": "dark"}),
        ],
    )
    def test_rejected_import_writes_nothing(
        self,
        storage: OptimizedStorage,
        fake_kv_store: FakeKeyValueStore,
        document: str,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        storage.save_project(_project("p1"))
        before = fake_kv_store.values

        with caplog.at_level(logging.ERROR):
            assert storage.import_data(document) is False

        assert fake_kv_store.values == before
        assert "Rejected import" in caplog.text


class TestDegradation:
    def test_write_failure_keeps_memory_state(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        store = FakeKeyValueStore(failing_keys={"user_settings", "icon_usage"})
        storage = SiteStoreContext.for_test(kv_store=store).storage

        with caplog.at_level(logging.ERROR):
            storage.add_to_recently_used_icons("Star")

        assert storage.icons.get("Star").usage == 1
        assert storage.get_user_settings().recently_used_icons == []
        assert storage.get_icon_selections() == {"Star": 1}
        assert "user_settings" in caplog.text

    def test_clear_all_data_removes_every_key(
        self, storage: OptimizedStorage, fake_kv_store: FakeKeyValueStore
    ) -> None:
        storage.save_project(_project("p1", sections=[_instance("hero-modern")]))
        storage.set_cache("k", 1)
        storage.save_user_profile(UserProfile(id="u1", email="a@b.uz", name="A"))
        storage.icons.add_custom(IconEntity(id="Logo", name="Logo", category="general"))
        storage.set_selected_theme("dark-elegant")

        storage.clear_all_data()

        assert fake_kv_store.keys() == []
        assert storage.icons.get("Logo") is None
        assert storage.icons.get("Star") is not None
        assert storage.sections.get("hero-modern").usage == 0
