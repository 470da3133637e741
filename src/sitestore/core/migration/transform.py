"""Read-only projection of stored state into relational rows.

MigrationTransform never writes: it reads OptimizedStorage's public surface,
flattens it into one row list per table, validates the rows and bundles
everything into an export document.
"""

import re
import uuid
from collections import Counter
from typing import Any, cast

from sitestore.core.catalog.types import CatalogEntity, EntityKind, SectionEntity, ThemeEntity
from sitestore.core.codec import encode_json, format_timestamp
from sitestore.core.config import SiteStoreConfig
from sitestore.core.migration.schema import SCHEMA_SQL, TABLES
from sitestore.core.migration.types import (
    AnalyticsRow,
    MigrationPlan,
    MigrationRowSet,
    ProjectRow,
    SectionRow,
    SectionTemplateRow,
    TablePlan,
    TableValidationRules,
    ThemeRow,
    UserRow,
    ValidationReport,
    ValidationRule,
    ValidationSummary,
)
from sitestore.core.storage.optimized_storage import OptimizedStorage
from sitestore.core.storage.types import (
    SectionInstance,
    StoredProject,
    UserProfile,
    UserSettings,
)
from sitestore.integrations.time.abc import Time

MIGRATION_FORMAT_VERSION = "1.0.0"
SECTIONS_COUNT_METRIC = "sections_count"

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
WEBSITE_URL_PATTERN = r"^[A-Za-z0-9_-]+$"

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_WEBSITE_URL_RE = re.compile(WEBSITE_URL_PATTERN)


class MigrationTransform:
    """Relational export of the normalized storage model.

    Catalog entities are split into section templates and themes by their
    explicit ``kind``; icons have no table and are not exported.
    """

    def __init__(self, storage: OptimizedStorage, time: Time, config: SiteStoreConfig) -> None:
        self._storage = storage
        self._time = time
        self._config = config

    def generate_schema(self) -> str:
        return SCHEMA_SQL

    def generate_migration_plan(self) -> MigrationPlan:
        """Tables with their indexes and constraints, plus the validation rules."""
        return MigrationPlan(
            tables=[
                TablePlan(
                    name=table.name,
                    indexes=[index.name for index in table.indexes],
                    constraints=list(table.constraints),
                )
                for table in TABLES
            ],
            validation_rules=[
                TableValidationRules(
                    table="users",
                    rules=[
                        ValidationRule(
                            field="email",
                            type="required",
                            constraint="true",
                            message="Email is required",
                        ),
                        ValidationRule(
                            field="name",
                            type="required",
                            constraint="true",
                            message="Name is required",
                        ),
                        ValidationRule(
                            field="email",
                            type="format",
                            constraint=EMAIL_PATTERN,
                            message="Invalid email format",
                        ),
                    ],
                ),
                TableValidationRules(
                    table="projects",
                    rules=[
                        ValidationRule(
                            field="name",
                            type="required",
                            constraint="true",
                            message="Project name is required",
                        ),
                        ValidationRule(
                            field="website_url",
                            type="required",
                            constraint="true",
                            message="Website URL is required",
                        ),
                        ValidationRule(
                            field="user_id",
                            type="required",
                            constraint="true",
                            message="Owner is required",
                        ),
                        ValidationRule(
                            field="website_url",
                            type="format",
                            constraint=WEBSITE_URL_PATTERN,
                            message="Invalid website URL format",
                        ),
                        ValidationRule(
                            field="website_url",
                            type="unique",
                            constraint="true",
                            message="Website URL must be unique",
                        ),
                    ],
                ),
            ],
        )

    # Row projection

    def transform_for_database(self) -> MigrationRowSet:
        """Flatten users, projects, section instances and catalog entities into rows."""
        profile = self._storage.get_user_profile()
        settings = self._storage.get_user_settings()
        projects = self._storage.get_all_projects()
        user_id = profile.id if profile is not None else None

        catalog: list[CatalogEntity] = [
            *self._storage.sections.get_all(),
            *self._storage.themes.get_all(),
        ]
        section_templates = [
            _section_template_row(cast(SectionEntity, entity))
            for entity in catalog
            if entity.kind == EntityKind.SECTION
        ]
        themes = [
            _theme_row(cast(ThemeEntity, entity))
            for entity in catalog
            if entity.kind == EntityKind.THEME
        ]

        return MigrationRowSet(
            users=[self._user_row(profile, settings)] if profile is not None else [],
            projects=[_project_row(project, user_id) for project in projects],
            sections=[
                _section_row(project, instance)
                for project in projects
                for instance in project.sections
            ],
            section_templates=section_templates,
            themes=themes,
            analytics=[_sections_count_row(project) for project in projects],
        )

    def _user_row(self, profile: UserProfile, settings: UserSettings) -> UserRow:
        return UserRow(
            id=profile.id,
            email=profile.email,
            name=profile.name,
            avatar=profile.avatar,
            company=profile.company,
            website=profile.website,
            bio=profile.bio,
            preferences=dict(settings.preferences),
            created_at=profile.created_at,
            updated_at=self._time.now(),
            last_login_at=profile.last_login_at,
        )

    # Validation

    def validate_migration_data(self, rows: MigrationRowSet | None = None) -> ValidationReport:
        """Check users and projects, accumulating findings without raising.

        Each user and project counts as one record. A duplicated website URL
        is reported once per URL value; it only makes records invalid when
        ``duplicate_url_invalidates`` is configured. Projects and sections
        that point at unknown themes or templates produce warnings.

        Args:
            rows: Rows to check; defaults to a fresh transform_for_database()
        """
        if rows is None:
            rows = self.transform_for_database()
        errors: list[str] = []
        warnings: list[str] = []
        valid: dict[str, bool] = {}

        for index, user in enumerate(rows.users):
            record = f"users[{index}]"
            if not user.email or not user.name:
                errors.append(f"User {index}: Missing required fields (email, name)")
                valid[record] = False
            elif not _EMAIL_RE.fullmatch(user.email):
                errors.append(f"User {index}: Invalid email format")
                valid[record] = False
            else:
                valid[record] = True

        for index, project in enumerate(rows.projects):
            record = f"projects[{index}]"
            missing = [
                name
                for name, value in (
                    ("name", project.name),
                    ("website_url", project.website_url),
                    ("user_id", project.user_id),
                )
                if not value
            ]
            if missing:
                errors.append(f"Project {index}: Missing required fields ({', '.join(missing)})")
                valid[record] = False
            elif not _WEBSITE_URL_RE.fullmatch(project.website_url):
                errors.append(f"Project {index}: Invalid website URL format")
                valid[record] = False
            else:
                valid[record] = True

        url_counts = Counter(
            project.website_url for project in rows.projects if project.website_url
        )
        for url, count in url_counts.items():
            if count < 2:
                continue
            errors.append(f"Duplicate website URL '{url}' used by {count} projects")
            if self._config.duplicate_url_invalidates:
                for index, project in enumerate(rows.projects):
                    if project.website_url == url:
                        valid[f"projects[{index}]"] = False

        theme_ids = {theme.id for theme in rows.themes}
        template_ids = {template.id for template in rows.section_templates}
        for index, project in enumerate(rows.projects):
            if project.theme_id and project.theme_id not in theme_ids:
                warnings.append(f"Project {index}: Unknown theme '{project.theme_id}'")
        for index, section in enumerate(rows.sections):
            if section.template_id not in template_ids:
                warnings.append(
                    f"Section {index}: Unknown section template '{section.template_id}'"
                )

        total = len(valid)
        valid_count = sum(1 for is_valid in valid.values() if is_valid)
        return ValidationReport(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            summary=ValidationSummary(
                total_records=total,
                valid_records=valid_count,
                invalid_records=total - valid_count,
            ),
        )

    # Export

    def export_migration_data(self) -> str:
        """Schema, validation report and rows as one indented JSON document."""
        rows = self.transform_for_database()
        report = self.validate_migration_data(rows)
        document: dict[str, Any] = {
            "metadata": {
                "exportedAt": format_timestamp(self._time.now()),
                "version": MIGRATION_FORMAT_VERSION,
                "validation": report.model_dump(by_alias=True, mode="json"),
                "schema": self.generate_schema(),
            },
            "data": rows.model_dump(mode="json"),
        }
        return encode_json(document, indent=2)


def _project_row(project: StoredProject, user_id: str | None) -> ProjectRow:
    return ProjectRow(
        id=project.id,
        user_id=user_id,
        name=project.name,
        description=project.description,
        website_url=project.website_url,
        theme_id=project.theme_id,
        is_published=project.is_published,
        published_url=project.publish_url,
        category=project.category or "general",
        seo_keywords=list(project.seo_keywords),
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


def _section_row(project: StoredProject, instance: SectionInstance) -> SectionRow:
    return SectionRow(
        id=instance.id,
        project_id=project.id,
        template_id=instance.section_id,
        order_index=instance.order,
        theme_id=instance.theme_id,
        data=instance.data,
        created_at=instance.created_at,
        updated_at=instance.updated_at,
    )


def _section_template_row(entity: SectionEntity) -> SectionTemplateRow:
    return SectionTemplateRow(
        id=entity.id,
        name=entity.name,
        category=entity.category,
        type=entity.type,
        description=entity.description,
        thumbnail=entity.thumbnail,
        icon=entity.icon_id,
        tags=list(entity.tags),
        default_content=entity.default_content,
        is_premium=entity.is_premium,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )


def _theme_row(entity: ThemeEntity) -> ThemeRow:
    return ThemeRow(
        id=entity.id,
        name=entity.name,
        colors=dict(entity.colors),
        fonts=dict(entity.fonts),
        shadows=dict(entity.shadows),
        is_premium=entity.is_premium,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )


def _sections_count_row(project: StoredProject) -> AnalyticsRow:
    return AnalyticsRow(
        id=str(uuid.uuid4()),
        project_id=project.id,
        metric_type=SECTIONS_COUNT_METRIC,
        metric_value=float(len(project.sections)),
        recorded_at=project.updated_at,
    )
