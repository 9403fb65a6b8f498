import argparse
import json
import sys
from pathlib import Path

from bs4 import BeautifulSoup

from .errors import ConfigurationError, SitemapError
from .log import log
from .pages import collect_pages
from .plugin import SitemapPlugin


class SiteBuilder:
    """Builds sitemap.xml for an already generated site directory."""

    def __init__(self, site_dir, options=None):
        self.site_dir = Path(site_dir).resolve()
        self.options = dict(options or {})
        self.pages = []
        self.plugin = None
        self.output = None

    def run(self):
        print("🚀 Starting sitemap build...")
        self.step_1_configure()
        self.step_2_scan_pages()
        self.step_3_process_pages()
        self.step_4_write_sitemap()
        print("✅ Build completed successfully!")
        return self.output

    def detect_site_url(self):
        index_path = self.site_dir / 'index.html'
        if not index_path.exists():
            log('WARN', "Root index.html not found. Cannot determine site URL.")
            return None

        with open(index_path, 'r', encoding='utf-8', errors='ignore') as f:
            soup = BeautifulSoup(f, 'html.parser')

        canonical = soup.find('link', rel='canonical')
        og_url = soup.find('meta', property='og:url')

        if canonical and canonical.get('href'):
            log('SUCCESS', f"Site URL detected (canonical): {canonical['href']}")
            return canonical['href']
        if og_url and og_url.get('content'):
            log('SUCCESS', f"Site URL detected (og:url): {og_url['content']}")
            return og_url['content']
        log('WARN', "Site URL not found in index.html.")
        return None

    def step_1_configure(self):
        print("Phase 1: Configuration...")
        if not self.site_dir.is_dir():
            raise ConfigurationError(f"Site directory not found: {self.site_dir}")
        if not self.options.get('site_url'):
            site_url = self.detect_site_url()
            if site_url:
                self.options['site_url'] = site_url
        self.plugin = SitemapPlugin(**self.options)
        print(f"   - Site URL: {self.plugin.config.site_url}")

    def step_2_scan_pages(self):
        print("Phase 2: Scanning Pages...")
        self.pages = collect_pages(self.site_dir)
        print(f"   - Found {len(self.pages)} pages.")

    def step_3_process_pages(self):
        print("Phase 3: Processing Pages...")
        for page in self.pages:
            self.plugin.write(page)
        print(f"   - Collected {len(self.plugin.entries)} URLs.")

    def step_4_write_sitemap(self):
        print("Phase 4: Generating Sitemap...")
        self.output = self.plugin.end()
        if self.output is None:
            log('WARN', "No pages to put in the sitemap.")
            return
        target = self.output.write()
        print(f"   - Sitemap written to {target}")


def load_config(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Could not read config file {path}: {e}") from e
    except ValueError as e:
        raise ConfigurationError(f"Invalid JSON in config file {path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    return config


def build_parser():
    parser = argparse.ArgumentParser(description="Generate sitemap.xml for a built static site.")
    parser.add_argument("site_dir", help="Directory with the generated pages")
    parser.add_argument("--site-url", default="", help="Site URL (detected from index.html when omitted)")
    parser.add_argument("--config", default="", help="JSON file with sitemap options")
    parser.add_argument("--output", default="", help="Sitemap file name (default sitemap.xml)")
    parser.add_argument("--images", action="store_true", help="Add image entries scraped from <img> tags")
    parser.add_argument("--videos", action="store_true", help="Declare the video namespace")
    parser.add_argument("--noindex", action="store_true", help="Leave out pages with a noindex meta tag")
    parser.add_argument("--verbose", action="store_true")
    return parser


def options_from_args(args):
    options = load_config(args.config) if args.config else {}
    if args.site_url:
        options['site_url'] = args.site_url
    if args.output:
        options['file_name'] = args.output
    for flag in ('images', 'videos', 'noindex', 'verbose'):
        if getattr(args, flag):
            options[flag] = True
    return options


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        builder = SiteBuilder(args.site_dir, options_from_args(args))
        builder.run()
    except SitemapError as e:
        log('ERROR', e.msg)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
