"""
Derived site artifacts built from the article store.

- `stats` / `navigation`: data/category-stats.json, data/navigation.json
- `feed`: public/feed.xml
- `sitemap`: public/sitemap.xml, public/robots.txt
- `validate`: feed/sitemap counts against the store
"""
