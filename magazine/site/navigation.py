"""Site navigation document (`data/navigation.json`)."""

from __future__ import annotations

from typing import Any

from magazine.config import NAV_CATEGORY_LIMIT

MAIN_MENU = [
    {"name": "Home", "href": "/", "active": True},
    {"name": "Articles", "href": "/articles/", "active": True},
    {"name": "Categories", "href": "/categories/", "active": True},
    {"name": "About", "href": "/about/", "active": True},
]

FOOTER_LINKS = [
    {
        "title": "Content",
        "links": [
            {"name": "Latest Articles", "href": "/articles/"},
            {"name": "Browse Categories", "href": "/categories/"},
            {"name": "Featured Posts", "href": "/#featured"},
        ],
    },
    {
        "title": "About",
        "links": [
            {"name": "Our Mission", "href": "/about/"},
            {"name": "AI Authors", "href": "/about/#authors"},
            {"name": "Contact", "href": "/about/#contact"},
        ],
    },
    {
        "title": "Resources",
        "links": [
            {"name": "RSS Feed", "href": "/feed.xml"},
            {"name": "Sitemap", "href": "/sitemap.xml"},
        ],
    },
]

SOCIAL_LINKS = [
    {"name": "GitHub", "href": "https://github.com/your-repo", "icon": "github"},
]


def generate_navigation_data(category_stats: dict[str, Any], *, category_limit: int = NAV_CATEGORY_LIMIT) -> dict[str, Any]:
    """Menus plus the busiest categories (stats are already sorted by count)."""
    return {
        "mainMenu": [dict(item) for item in MAIN_MENU],
        "categories": list(category_stats.get("categories", []))[:category_limit],
        "footerLinks": [
            {"title": group["title"], "links": [dict(link) for link in group["links"]]} for group in FOOTER_LINKS
        ],
        "social": [dict(item) for item in SOCIAL_LINKS],
    }
