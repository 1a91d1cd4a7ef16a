"""site_mirror.parser: turning fetched markup into a queryable document."""
from site_mirror.parser.html_parser import parse_html

__all__ = ["parse_html"]
