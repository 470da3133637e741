"""Theme registry, its built-in catalog and CSS custom property rendering."""

import re
from typing import Any

from sitestore.core.catalog.registry import Registry
from sitestore.core.catalog.types import ThemeEntity

_STANDARD_RADIUS = {
    "sm": "0.25rem",
    "md": "0.5rem",
    "lg": "0.75rem",
    "xl": "1rem",
    "full": "9999px",
}
_STANDARD_SPACING = {"xs": "0.5rem", "sm": "1rem", "md": "1.5rem", "lg": "2rem", "xl": "3rem"}


def _shadows(opacity: str) -> dict[str, str]:
    return {
        "sm": f"0 1px 2px 0 rgb(0 0 0 / {opacity})",
        "md": f"0 4px 6px -1px rgb(0 0 0 / {opacity})",
        "lg": f"0 10px 15px -3px rgb(0 0 0 / {opacity})",
        "xl": f"0 20px 25px -5px rgb(0 0 0 / {opacity})",
    }


def _built_in_theme_definitions() -> list[dict[str, Any]]:
    return [
        {
            "id": "modern-blue",
            "name": "Modern Blue",
            "category": "modern",
            "colors": {
                "primary": "#3b82f6",
                "secondary": "#06b6d4",
                "accent": "#8b5cf6",
                "background": "#ffffff",
                "surface": "#ffffff",
                "text": "#111827",
                "textSecondary": "#6b7280",
                "border": "#e5e7eb",
                "success": "#10b981",
                "warning": "#f59e0b",
                "error": "#ef4444",
                "primary100": "#dbeafe",
                "primary200": "#bfdbfe",
                "primary300": "#93c5fd",
                "secondary100": "#cffafe",
                "secondary200": "#a5f3fc",
                "accent100": "#f3e8ff",
                "accent200": "#e9d5ff",
            },
            "fonts": {"primary": "Inter", "secondary": "Inter", "accent": "Inter"},
            "shadows": {
                "sm": "0 1px 2px 0 rgb(0 0 0 / 0.05)",
                "md": "0 4px 6px -1px rgb(0 0 0 / 0.1)",
                "lg": "0 10px 15px -3px rgb(0 0 0 / 0.1)",
                "xl": "0 20px 25px -5px rgb(0 0 0 / 0.1)",
            },
            "border_radius": dict(_STANDARD_RADIUS),
            "spacing": dict(_STANDARD_SPACING),
            "typography": {
                "h1": "2.5rem",
                "h2": "2rem",
                "h3": "1.5rem",
                "h4": "1.25rem",
                "body": "1rem",
                "small": "0.875rem",
                "button": "1rem",
                "headingWeight": 700,
                "bodyWeight": 400,
                "buttonWeight": 600,
                "headingLineHeight": 1.2,
                "bodyLineHeight": 1.6,
            },
            "animations": {"duration": "0.3s", "easing": "cubic-bezier(0.4, 0, 0.2, 1)"},
        },
        {
            "id": "dark-elegant",
            "name": "Dark Elegant",
            "category": "elegant",
            "colors": {
                "primary": "#f59e0b",
                "secondary": "#10b981",
                "accent": "#8b5cf6",
                "background": "#111827",
                "surface": "#1f2937",
                "text": "#f9fafb",
                "textSecondary": "#d1d5db",
                "border": "#374151",
                "success": "#10b981",
                "warning": "#f59e0b",
                "error": "#ef4444",
                "primary100": "#fef3c7",
                "primary200": "#fde68a",
                "primary300": "#fcd34d",
                "secondary100": "#d1fae5",
                "secondary200": "#a7f3d0",
                "accent100": "#f3e8ff",
                "accent200": "#e9d5ff",
            },
            "fonts": {"primary": "Playfair Display", "secondary": "Inter", "accent": "Inter"},
            "shadows": _shadows("0.3"),
            "border_radius": dict(_STANDARD_RADIUS),
            "spacing": dict(_STANDARD_SPACING),
            "typography": {
                "h1": "3rem",
                "h2": "2.25rem",
                "h3": "1.75rem",
                "h4": "1.5rem",
                "body": "1.125rem",
                "small": "1rem",
                "button": "1.125rem",
                "headingWeight": 700,
                "bodyWeight": 400,
                "buttonWeight": 600,
                "headingLineHeight": 1.1,
                "bodyLineHeight": 1.7,
            },
            "animations": {"duration": "0.4s", "easing": "cubic-bezier(0.25, 0.46, 0.45, 0.94)"},
        },
        {
            "id": "minimal-clean",
            "name": "Minimal Clean",
            "category": "minimal",
            "colors": {
                "primary": "#000000",
                "secondary": "#6b7280",
                "accent": "#ef4444",
                "background": "#ffffff",
                "surface": "#f9fafb",
                "text": "#111827",
                "textSecondary": "#6b7280",
                "border": "#e5e7eb",
                "success": "#10b981",
                "warning": "#f59e0b",
                "error": "#ef4444",
                "primary100": "#f3f4f6",
                "primary200": "#e5e7eb",
                "primary300": "#d1d5db",
                "secondary100": "#f9fafb",
                "secondary200": "#f3f4f6",
                "accent100": "#fef2f2",
                "accent200": "#fee2e2",
            },
            "fonts": {"primary": "Inter", "secondary": "Inter", "accent": "JetBrains Mono"},
            "shadows": {
                "sm": "0 1px 2px 0 rgb(0 0 0 / 0.03)",
                "md": "0 2px 4px 0 rgb(0 0 0 / 0.06)",
                "lg": "0 4px 8px 0 rgb(0 0 0 / 0.08)",
                "xl": "0 8px 16px 0 rgb(0 0 0 / 0.1)",
            },
            "border_radius": {
                "sm": "0.125rem",
                "md": "0.25rem",
                "lg": "0.5rem",
                "xl": "0.75rem",
                "full": "9999px",
            },
            "spacing": {
                "xs": "0.25rem",
                "sm": "0.75rem",
                "md": "1.25rem",
                "lg": "1.75rem",
                "xl": "2.5rem",
            },
            "typography": {
                "h1": "2.25rem",
                "h2": "1.875rem",
                "h3": "1.5rem",
                "h4": "1.25rem",
                "body": "1rem",
                "small": "0.875rem",
                "button": "0.875rem",
                "headingWeight": 600,
                "bodyWeight": 400,
                "buttonWeight": 500,
                "headingLineHeight": 1.3,
                "bodyLineHeight": 1.5,
            },
            "animations": {"duration": "0.2s", "easing": "cubic-bezier(0.4, 0, 1, 1)"},
        },
    ]


def css_variable_name(key: str) -> str:
    """camelCase key to kebab-case: ``textSecondary`` -> ``text-secondary``."""
    return re.sub(r"([A-Z])", r"-\1", key).lower()


class ThemeRegistry(Registry[ThemeEntity]):
    """Catalog of project-wide themes."""

    entity_type = ThemeEntity

    def _built_in_entities(self) -> list[ThemeEntity]:
        now = self._time.now()
        return [
            ThemeEntity(
                **definition,
                keywords=[definition["name"].lower(), definition["category"]],
                is_built_in=True,
                is_premium=False,
                usage=0,
                created_at=now,
                updated_at=now,
            )
            for definition in _built_in_theme_definitions()
        ]

    def generate_css(self, theme_id: str) -> str:
        """Render a theme as a ``:root`` block of CSS custom properties.

        Returns:
            The CSS text, or an empty string for an unknown theme id
        """
        theme = self.get(theme_id)
        if theme is None:
            return ""

        lines = [":root {", "  /* Colors */"]
        lines.extend(
            f"  --color-{css_variable_name(key)}: {value};" for key, value in theme.colors.items()
        )
        lines.append("  /* Fonts */")
        lines.append(f"  --font-primary: '{theme.fonts.get('primary', '')}', sans-serif;")
        lines.append(f"  --font-secondary: '{theme.fonts.get('secondary', '')}', sans-serif;")
        lines.append(f"  --font-accent: '{theme.fonts.get('accent', '')}', monospace;")
        lines.append("  /* Shadows */")
        lines.extend(f"  --shadow-{key}: {value};" for key, value in theme.shadows.items())
        lines.append("  /* Border Radius */")
        lines.extend(f"  --radius-{key}: {value};" for key, value in theme.border_radius.items())
        lines.append("  /* Spacing */")
        lines.extend(f"  --spacing-{key}: {value};" for key, value in theme.spacing.items())
        lines.append("  /* Typography */")
        lines.extend(
            f"  --typography-{css_variable_name(key)}: {value};"
            for key, value in theme.typography.items()
        )
        lines.append("  /* Animations */")
        lines.append(f"  --animation-duration: {theme.animations.get('duration', '')};")
        lines.append(f"  --animation-easing: {theme.animations.get('easing', '')};")
        lines.append("}")
        return "\n".join(lines) + "\n"
