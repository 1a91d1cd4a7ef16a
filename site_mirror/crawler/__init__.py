"""site_mirror.crawler: URL handling, fetching, extraction, persistence and the crawl drivers."""
