# === FILE: site_mirror/engine.py ===
"""
Wrapper module launching a mirror run.
"""
from site_mirror.config import MirrorConfig
from site_mirror.crawler.crawler import MirrorCrawler
from site_mirror.report import MirrorReport


async def start_mirror(cfg: MirrorConfig) -> MirrorReport:
    """
    Run the crawler inside its HTTP session and return the run report.

    Parameters
    ----------
    cfg : MirrorConfig
        Mirror configuration; ``cfg.strategy`` picks the crawl driver.

    Returns
    -------
    MirrorReport
        Pages mirrored and, for the worklist strategy, pages that failed.
    """
    async with MirrorCrawler(cfg) as crawler:
        if cfg.strategy == "recursive":
            return await crawler.run_recursive()
        return await crawler.run()

__all__ = ["start_mirror"]
