from .entries import Entry, collapse_index, get_entry_config, resolve
from .errors import (
    ConfigurationError,
    ExpandDataError,
    SitemapError,
    SourceReadError,
    UnsupportedInputError,
)
from .options import Computed, Fixed, HreflangLink, MappingRule, SiteConfig
from .pages import OutputFile, PageFile, collect_pages
from .plugin import SitemapPlugin, generate
from .sitemap import is_changefreq_valid, prepare_sitemap, process_entry
from .urlset import UrlSet

__version__ = '1.0.0'
