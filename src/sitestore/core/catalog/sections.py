"""Section registry, its built-in catalog and the section instance factory."""

import copy
import uuid
from typing import Any

from sitestore.core.catalog.registry import Registry
from sitestore.core.catalog.types import SectionEntity
from sitestore.core.storage.types import SectionInstance


class SectionNotFoundError(Exception):
    """Raised when an instance is requested for a section id not in the catalog."""

    def __init__(self, section_id: str) -> None:
        self.section_id = section_id
        super().__init__(f'Section with id "{section_id}" not found')


def _pexels(photo_id: int, width: int, height: int) -> str:
    return (
        f"https://images.pexels.com/photos/{photo_id}/pexels-photo-{photo_id}.jpeg"
        f"?auto=compress&cs=tinysrgb&w={width}&h={height}&dpr=1"
    )


def _built_in_section_definitions() -> list[dict[str, Any]]:
    return [
        {
            "id": "header-simple",
            "name": "Simple Header",
            "category": "headers",
            "description": "Clean navigation header with logo and menu items",
            "thumbnail": _pexels(3184432, 400, 200),
            "icon_id": "navigation",
            "tags": ["navigation", "simple", "clean", "header"],
            "required_icons": ["menu", "x"],
            "default_content": {
                "logo": "Your Brand",
                "menuItems": ["Home", "About", "Services", "Contact"],
                "ctaText": "Get Started",
                "ctaLink": "#",
            },
            "rating": 4.8,
            "downloads": 1250,
        },
        {
            "id": "hero-modern",
            "name": "Modern Hero",
            "category": "heroes",
            "description": "Stunning fullscreen hero with background image and powerful CTA",
            "thumbnail": _pexels(3184292, 400, 200),
            "icon_id": "rocket",
            "tags": ["hero", "fullscreen", "background", "cta"],
            "required_icons": ["play", "arrow-right"],
            "default_content": {
                "title": "Build Something Extraordinary",
                "subtitle": "Transform your ideas into reality",
                "description": (
                    "Create stunning websites with our powerful, intuitive platform. "
                    "No coding required."
                ),
                "ctaText": "Start Building Now",
                "ctaLink": "#",
                "secondaryCtaText": "Watch Demo",
                "backgroundImage": _pexels(3184292, 1200, 800),
            },
            "rating": 4.9,
            "downloads": 2100,
        },
        {
            "id": "about-simple",
            "name": "About Us Simple",
            "category": "about",
            "description": "Clean about section with image and feature list",
            "thumbnail": _pexels(3184398, 400, 200),
            "icon_id": "users",
            "tags": ["about", "company", "features", "simple"],
            "required_icons": ["check"],
            "default_content": {
                "title": "About Our Mission",
                "description": (
                    "We are passionate innovators dedicated to creating exceptional digital "
                    "experiences that empower businesses to thrive in the modern world."
                ),
                "image": _pexels(3184398, 800, 600),
                "features": [
                    "15+ Years Experience",
                    "Award-Winning Team",
                    "Global Reach",
                    "Customer-Focused",
                ],
            },
            "rating": 4.7,
            "downloads": 890,
        },
        {
            "id": "services-grid",
            "name": "Services Grid",
            "category": "services",
            "description": "Professional services showcase in grid layout",
            "thumbnail": _pexels(3184339, 400, 200),
            "icon_id": "zap",
            "tags": ["services", "grid", "business", "offerings"],
            "required_icons": [
                "palette", "code", "smartphone", "trending-up", "bar-chart-3", "shield",
            ],
            "default_content": {
                "title": "Our Premium Services",
                "subtitle": "Comprehensive solutions for your business needs",
                "services": [
                    {
                        "iconId": "palette",
                        "title": "UI/UX Design",
                        "description": (
                            "Beautiful, intuitive designs that captivate and convert your audience."
                        ),
                    },
                    {
                        "iconId": "code",
                        "title": "Web Development",
                        "description": (
                            "Custom web applications built with cutting-edge technologies."
                        ),
                    },
                    {
                        "iconId": "smartphone",
                        "title": "Mobile Apps",
                        "description": (
                            "Native and cross-platform mobile solutions for iOS and Android."
                        ),
                    },
                ],
            },
            "rating": 4.8,
            "downloads": 1560,
        },
        {
            "id": "features-list",
            "name": "Feature Highlights",
            "category": "features",
            "description": "Highlight your key features with icons and descriptions",
            "thumbnail": _pexels(3184418, 400, 200),
            "icon_id": "star",
            "tags": ["features", "highlights", "benefits", "list"],
            "required_icons": ["zap", "lock", "smartphone", "palette"],
            "default_content": {
                "title": "Powerful Features",
                "subtitle": "Everything you need to succeed",
                "features": [
                    {
                        "iconId": "zap",
                        "title": "Lightning Fast Performance",
                        "description": "Optimized for speed with sub-second load times.",
                    },
                    {
                        "iconId": "lock",
                        "title": "Bank-Level Security",
                        "description": "Your data is protected with enterprise-grade encryption.",
                    },
                    {
                        "iconId": "smartphone",
                        "title": "Mobile-First Design",
                        "description": "Perfect experience across all devices and screen sizes.",
                    },
                    {
                        "iconId": "palette",
                        "title": "Fully Customizable",
                        "description": "Tailor every aspect to match your unique brand identity.",
                    },
                ],
            },
            "rating": 4.6,
            "downloads": 1120,
        },
        {
            "id": "contact-form",
            "name": "Contact Form",
            "category": "contact",
            "description": "Professional contact form with contact information",
            "thumbnail": _pexels(3184394, 400, 200),
            "icon_id": "mail",
            "tags": ["contact", "form", "communication", "support"],
            "required_icons": ["mail", "phone", "map-pin"],
            "default_content": {
                "title": "Get In Touch",
                "subtitle": (
                    "We'd love to hear from you. Send us a message and we'll respond "
                    "within 24 hours."
                ),
                "email": "hello@yourcompany.com",
                "phone": "+1 (555) 123-4567",
                "address": "123 Innovation Drive, Tech City, TC 12345",
            },
            "rating": 4.7,
            "downloads": 980,
        },
    ]


class SectionRegistry(Registry[SectionEntity]):
    """Catalog of section templates.

    Section usage also counts downloads, so the usage map stores
    ``{"usage": n, "downloads": m}`` per section instead of a bare integer.
    """

    entity_type = SectionEntity

    def _built_in_entities(self) -> list[SectionEntity]:
        now = self._time.now()
        return [
            SectionEntity(
                **definition,
                type=definition["id"],
                keywords=list(definition["tags"]),
                is_built_in=True,
                is_premium=False,
                usage=0,
                created_at=now,
                updated_at=now,
            )
            for definition in _built_in_section_definitions()
        ]

    def _bump_usage(self, entity: SectionEntity) -> None:
        entity.usage += 1
        entity.downloads += 1

    def _usage_entry(self, entity: SectionEntity) -> Any:
        return {"usage": entity.usage, "downloads": entity.downloads}

    def _apply_usage_entry(self, entity: SectionEntity, value: Any) -> None:
        if not isinstance(value, dict):
            return
        usage = value.get("usage", 0)
        downloads = value.get("downloads", 0)
        entity.usage = usage if isinstance(usage, int) and usage >= 0 else 0
        entity.downloads = downloads if isinstance(downloads, int) and downloads >= 0 else 0

    def create_section_instance(
        self, section_id: str, data: dict[str, Any] | None = None
    ) -> SectionInstance:
        """Create a placed copy of a section and count it as a use.

        Args:
            section_id: Id of the section template
            data: Content for the instance; defaults to a copy of the
                template's default content

        Returns:
            New SectionInstance with order 0

        Raises:
            SectionNotFoundError: If section_id is not in the catalog
        """
        section = self.get(section_id)
        if section is None:
            raise SectionNotFoundError(section_id)

        self.increment_usage(section_id)

        now = self._time.now()
        return SectionInstance(
            id=str(uuid.uuid4()),
            section_id=section_id,
            data=data if data is not None else copy.deepcopy(section.default_content),
            order=0,
            created_at=now,
            updated_at=now,
        )
