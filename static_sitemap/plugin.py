import os
import re

from . import entries as resolver
from .errors import ExpandDataError, UnsupportedInputError
from .log import log
from .options import SiteConfig
from .pages import OutputFile
from .sitemap import prepare_sitemap
from .urlset import UrlSet

NOT_FOUND_RE = re.compile(r'404\.html?$', re.IGNORECASE)
NOINDEX_RE = re.compile(r'<meta [^>]*?noindex', re.IGNORECASE)


class SitemapPlugin:
    """
    Collects pages one at a time and produces the sitemap at the end.

    write() is called once per page in build order, end() once when the batch
    is complete. end() returns the OutputFile, or None when no page made it
    into the sitemap.
    """

    def __init__(self, **options):
        self.config = SiteConfig(**options)
        self.entries = []
        self.urlset = UrlSet()
        self.first_file = None

    def write(self, file):
        # null files (no contents) are handled, directories are not
        if file.is_directory:
            self._skip(file, 'directory')
            return []

        if file.is_stream():
            raise UnsupportedInputError('Streaming not supported')

        # skip 404 file
        if NOT_FOUND_RE.search(file.relative):
            self._skip(file, '404 page')
            return []

        if self.config.noindex and NOINDEX_RE.search(file.text()):
            self._skip(file, 'noindex')
            return []

        if self.first_file is None:
            self.first_file = file

        try:
            new_entries = resolver.resolve(file, self.config, self.urlset)
        except ExpandDataError as e:
            log('ERROR', f"[sitemap] error processing entry: {file.path}: {e.msg}")
            return []

        self.entries.extend(new_entries)
        return new_entries

    def end(self):
        if self.first_file is None:
            return None

        entries, first_file = self.entries, self.first_file
        try:
            contents = prepare_sitemap(entries, self.config, self.urlset)
        finally:
            self.entries = []
            self.first_file = None

        if self.config.verbose:
            log('INFO', f"Files in sitemap: {len(entries)}")

        return OutputFile(
            path=os.path.join(first_file.cwd, self.config.file_name),
            contents=contents.encode('utf-8'),
            cwd=first_file.cwd,
            base=first_file.cwd,
        )

    def _skip(self, file, reason):
        if self.config.verbose:
            log('INFO', f"Skipping {file.relative} ({reason})")


def generate(files, **options):
    """Run a whole batch of pages through the plugin and return the sitemap file (or None)."""
    plugin = SitemapPlugin(**options)
    files = list(files)
    for file in files:
        if not file.is_directory and file.is_stream():
            raise UnsupportedInputError('Streaming not supported')
    for file in files:
        plugin.write(file)
    return plugin.end()
