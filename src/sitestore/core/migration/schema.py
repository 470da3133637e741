"""PostgreSQL DDL for the relational export target.

Tables are declared once as TableDefinition entries; the DDL text and the
migration plan are both rendered from them.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class IndexDefinition:
    name: str
    columns: str


@dataclass(frozen=True)
class TableDefinition:
    """A table: column block, indexes, named constraints, updated_at trigger flag."""

    name: str
    columns: str
    indexes: tuple[IndexDefinition, ...] = ()
    constraints: tuple[str, ...] = ()
    touch_updated_at: bool = False


TABLES: tuple[TableDefinition, ...] = (
    TableDefinition(
        name="users",
        columns="""\
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    email VARCHAR(255) UNIQUE NOT NULL,
    name VARCHAR(255) NOT NULL,
    avatar TEXT,
    company VARCHAR(255),
    website VARCHAR(255),
    bio TEXT,
    preferences JSONB DEFAULT '{}',
    subscription JSONB DEFAULT '{}',
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    last_login_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()""",
        constraints=("unique_email", "check_email_format"),
        touch_updated_at=True,
    ),
    TableDefinition(
        name="projects",
        columns="""\
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name VARCHAR(255) NOT NULL,
    description TEXT,
    website_url VARCHAR(255) UNIQUE NOT NULL,
    theme_id VARCHAR(255) NOT NULL,
    is_published BOOLEAN DEFAULT FALSE,
    published_url TEXT,
    category VARCHAR(100) DEFAULT 'general',
    seo_keywords JSONB DEFAULT '[]',
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()""",
        indexes=(
            IndexDefinition("idx_projects_user_id", "user_id"),
            IndexDefinition("idx_projects_website_url", "website_url"),
            IndexDefinition("idx_projects_is_published", "is_published"),
            IndexDefinition("idx_projects_created_at", "created_at"),
        ),
        constraints=("fk_projects_user_id", "unique_website_url", "check_website_url_format"),
        touch_updated_at=True,
    ),
    TableDefinition(
        name="sections",
        columns="""\
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    project_id UUID NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
    template_id VARCHAR(255) NOT NULL,
    order_index INTEGER NOT NULL,
    theme_id VARCHAR(255),
    data JSONB DEFAULT '{}',
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()""",
        indexes=(
            IndexDefinition("idx_sections_project_id", "project_id"),
            IndexDefinition("idx_sections_order_index", "project_id, order_index"),
        ),
        constraints=("fk_sections_project_id",),
        touch_updated_at=True,
    ),
    TableDefinition(
        name="section_templates",
        columns="""\
    id VARCHAR(255) PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    category VARCHAR(100) NOT NULL,
    type VARCHAR(100) NOT NULL,
    description TEXT,
    thumbnail TEXT,
    icon VARCHAR(50),
    tags JSONB DEFAULT '[]',
    default_content JSONB DEFAULT '{}',
    is_premium BOOLEAN DEFAULT FALSE,
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()""",
        indexes=(
            IndexDefinition("idx_section_templates_category", "category"),
            IndexDefinition("idx_section_templates_type", "type"),
        ),
        touch_updated_at=True,
    ),
    TableDefinition(
        name="themes",
        columns="""\
    id VARCHAR(255) PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    colors JSONB DEFAULT '{}',
    fonts JSONB DEFAULT '{}',
    shadows JSONB DEFAULT '{}',
    is_premium BOOLEAN DEFAULT FALSE,
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()""",
        touch_updated_at=True,
    ),
    TableDefinition(
        name="project_collaborators",
        columns="""\
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    project_id UUID NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
    user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    role VARCHAR(50) NOT NULL CHECK (role IN ('owner', 'editor', 'viewer')),
    permissions JSONB DEFAULT '[]',
    invited_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    accepted_at TIMESTAMP WITH TIME ZONE,
    UNIQUE(project_id, user_id)""",
        constraints=(
            "fk_collaborators_project_id",
            "fk_collaborators_user_id",
            "unique_project_user",
            "check_role",
        ),
    ),
    TableDefinition(
        name="deployment_history",
        columns="""\
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    project_id UUID NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
    version VARCHAR(50) NOT NULL,
    status VARCHAR(50) NOT NULL CHECK (status IN ('success', 'failed', 'pending')),
    url TEXT,
    notes TEXT,
    deployed_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()""",
        indexes=(
            IndexDefinition("idx_deployment_history_project_id", "project_id"),
            IndexDefinition("idx_deployment_history_deployed_at", "deployed_at"),
        ),
        constraints=("fk_deployments_project_id", "check_status"),
    ),
    TableDefinition(
        name="analytics",
        columns="""\
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    project_id UUID NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
    metric_type VARCHAR(100) NOT NULL,
    metric_value DECIMAL(10,2) NOT NULL,
    metadata JSONB DEFAULT '{}',
    recorded_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()""",
        indexes=(
            IndexDefinition("idx_analytics_project_id", "project_id"),
            IndexDefinition("idx_analytics_metric_type", "metric_type"),
            IndexDefinition("idx_analytics_recorded_at", "recorded_at"),
        ),
        constraints=("fk_analytics_project_id",),
    ),
    TableDefinition(
        name="user_sessions",
        columns="""\
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    session_start TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    session_end TIMESTAMP WITH TIME ZONE,
    duration_minutes INTEGER,
    pages_visited JSONB DEFAULT '[]',
    actions_performed JSONB DEFAULT '[]'""",
        indexes=(
            IndexDefinition("idx_user_sessions_user_id", "user_id"),
            IndexDefinition("idx_user_sessions_session_start", "session_start"),
        ),
        constraints=("fk_sessions_user_id",),
    ),
)

_HEADER = """\
-- Website builder database schema

-- Enable UUID extension
CREATE EXTENSION IF NOT EXISTS "uuid-ossp";
"""

_TOUCH_FUNCTION = """\
-- Triggers for updated_at timestamps
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = NOW();
    RETURN NEW;
END;
$$ language 'plpgsql';
"""


def _table_title(name: str) -> str:
    return name.replace("_", " ").capitalize()


def render_schema(tables: tuple[TableDefinition, ...] = TABLES) -> str:
    """Render tables, then indexes, then updated_at triggers as one DDL script."""
    parts = [_HEADER]
    for table in tables:
        parts.append(
            f"-- {_table_title(table.name)} table\n"
            f"CREATE TABLE {table.name} (\n{table.columns}\n);\n"
        )

    index_blocks = []
    for table in tables:
        if not table.indexes:
            continue
        index_blocks.append(
            "\n".join(
                f"CREATE INDEX {index.name} ON {table.name}({index.columns});"
                for index in table.indexes
            )
        )
    parts.append("-- Indexes for performance\n" + "\n\n".join(index_blocks) + "\n")

    parts.append(_TOUCH_FUNCTION)
    for table in tables:
        if table.touch_updated_at:
            parts.append(
                f"CREATE TRIGGER update_{table.name}_updated_at BEFORE UPDATE ON {table.name}\n"
                "    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();\n"
            )
    return "\n".join(parts)


SCHEMA_SQL = render_schema()
