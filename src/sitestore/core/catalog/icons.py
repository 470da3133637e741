"""Icon registry and its built-in catalog."""

from sitestore.core.catalog.registry import Registry
from sitestore.core.catalog.types import IconEntity

BUILT_IN_ICONS: dict[str, list[str]] = {
    "general": [
        "Star", "Heart", "Shield", "Lock", "Eye", "Home", "User", "Settings",
        "Search", "Filter", "Bookmark", "Tag", "Flag", "Bell", "Clock", "Calendar",
    ],
    "business": [
        "Briefcase", "Building", "TrendingUp", "BarChart3", "PieChart", "Target",
        "Award", "Trophy", "Medal", "Crown", "Gem", "DollarSign", "CreditCard",
    ],
    "technology": [
        "Smartphone", "Laptop", "Monitor", "Tablet", "Watch", "Gamepad2", "Wifi",
        "Bluetooth", "Database", "Server", "Cloud", "Code", "Terminal", "Cpu",
    ],
    "communication": [
        "MessageSquare", "MessageCircle", "Send", "Bell", "Phone", "Mail",
        "Users", "UserCheck", "UserPlus", "Share", "Link", "ExternalLink",
    ],
    "navigation": [
        "Home", "ArrowUp", "ArrowDown", "ArrowLeft", "ArrowRight", "ChevronUp",
        "ChevronDown", "ChevronLeft", "ChevronRight", "Menu", "MoreVertical",
    ],
    "media": [
        "Play", "Pause", "Square", "SkipForward", "SkipBack", "Repeat",
        "Volume2", "VolumeX", "Camera", "Image", "Video", "Music", "Headphones",
    ],
    "actions": [
        "Plus", "Minus", "Check", "X", "Edit", "Trash2", "Copy", "Download",
        "Upload", "Save", "Search", "Filter", "Maximize", "Minimize",
    ],
    "weather": [
        "Sun", "Moon", "Cloud", "CloudRain", "Snowflake", "Thermometer",
        "Wind", "Umbrella", "Rainbow", "Sunrise", "Sunset",
    ],
    "food": [
        "Coffee", "Pizza", "Utensils", "Wine", "Apple", "Cherry", "Cake",
        "IceCream", "Cookie", "Sandwich", "Soup", "Salad",
    ],
    "security": [
        "Shield", "Lock", "Unlock", "Key", "ShieldCheck", "ShieldAlert",
        "Eye", "EyeOff", "Fingerprint", "Scan", "AlertTriangle",
    ],
}  # fmt: skip

_CONTEXT_KEYWORDS: dict[str, list[str]] = {
    "star": ["favorite", "rating", "bookmark"],
    "heart": ["love", "like", "favorite"],
    "home": ["house", "main", "dashboard"],
    "user": ["person", "profile", "account"],
    "mail": ["email", "message", "contact"],
    "phone": ["call", "contact", "mobile"],
    "search": ["find", "look", "magnify"],
    "edit": ["modify", "change", "update"],
    "delete": ["remove", "trash", "clear"],
    "save": ["store", "keep", "preserve"],
}


def generate_icon_keywords(icon_name: str, category: str) -> list[str]:
    """Keywords for a built-in icon: its lower-cased name, category and synonyms."""
    lowered = icon_name.lower()
    return [lowered, category, *_CONTEXT_KEYWORDS.get(lowered, [])]


class IconRegistry(Registry[IconEntity]):
    """Catalog of icons referenced by id from section content.

    An icon listed under several categories keeps the last category written,
    at the position where it first appeared.
    """

    entity_type = IconEntity

    def _built_in_entities(self) -> list[IconEntity]:
        now = self._time.now()
        by_id: dict[str, IconEntity] = {}
        for category, icon_names in BUILT_IN_ICONS.items():
            for icon_name in icon_names:
                by_id[icon_name] = IconEntity(
                    id=icon_name,
                    name=icon_name,
                    category=category,
                    keywords=generate_icon_keywords(icon_name, category),
                    is_built_in=True,
                    is_premium=False,
                    usage=0,
                    created_at=now,
                )
        return list(by_id.values())
