"""Relational rows, validation report and migration plan models."""

from typing import Any

from pydantic import BaseModel, Field

from sitestore.core.catalog.types import DocumentModel, Timestamp


class UserRow(BaseModel):
    id: str
    email: str
    name: str
    avatar: str | None = None
    company: str | None = None
    website: str | None = None
    bio: str | None = None
    preferences: dict[str, Any] = Field(default_factory=dict)
    subscription: dict[str, Any] = Field(default_factory=dict)
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None
    last_login_at: Timestamp | None = None


class ProjectRow(BaseModel):
    id: str
    user_id: str | None
    name: str
    description: str | None = None
    website_url: str
    theme_id: str
    is_published: bool = False
    published_url: str | None = None
    category: str = "general"
    seo_keywords: list[str] = Field(default_factory=list)
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None


class SectionRow(BaseModel):
    id: str
    project_id: str
    template_id: str
    order_index: int
    theme_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None


class SectionTemplateRow(BaseModel):
    id: str
    name: str
    category: str
    type: str
    description: str = ""
    thumbnail: str = ""
    icon: str = ""
    tags: list[str] = Field(default_factory=list)
    default_content: dict[str, Any] = Field(default_factory=dict)
    is_premium: bool = False
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None


class ThemeRow(BaseModel):
    id: str
    name: str
    colors: dict[str, str] = Field(default_factory=dict)
    fonts: dict[str, str] = Field(default_factory=dict)
    shadows: dict[str, str] = Field(default_factory=dict)
    is_premium: bool = False
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None


class AnalyticsRow(BaseModel):
    id: str
    project_id: str
    metric_type: str
    metric_value: float
    metadata: dict[str, Any] = Field(default_factory=dict)
    recorded_at: Timestamp | None = None


class MigrationRowSet(BaseModel):
    """One list of rows per table.

    Collaborators, deployments and sessions have no source data yet and
    are always empty.
    """

    users: list[UserRow] = Field(default_factory=list)
    projects: list[ProjectRow] = Field(default_factory=list)
    sections: list[SectionRow] = Field(default_factory=list)
    section_templates: list[SectionTemplateRow] = Field(default_factory=list)
    themes: list[ThemeRow] = Field(default_factory=list)
    project_collaborators: list[dict[str, Any]] = Field(default_factory=list)
    deployment_history: list[dict[str, Any]] = Field(default_factory=list)
    analytics: list[AnalyticsRow] = Field(default_factory=list)
    user_sessions: list[dict[str, Any]] = Field(default_factory=list)


class ValidationSummary(DocumentModel):
    total_records: int
    valid_records: int
    invalid_records: int


class ValidationReport(DocumentModel):
    """Accumulated findings; validation never raises."""

    is_valid: bool
    errors: list[str]
    warnings: list[str]
    summary: ValidationSummary


class TablePlan(DocumentModel):
    name: str
    indexes: list[str]
    constraints: list[str]


class ValidationRule(DocumentModel):
    field: str
    type: str
    constraint: str
    message: str


class TableValidationRules(DocumentModel):
    table: str
    rules: list[ValidationRule]


class MigrationPlan(DocumentModel):
    tables: list[TablePlan]
    validation_rules: list[TableValidationRules]
