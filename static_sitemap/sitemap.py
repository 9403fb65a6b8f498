"""
Serialization of resolved entries into a sitemap document.
"""
import re
from datetime import date, datetime, timezone
from xml.sax.saxutils import escape

from bs4 import BeautifulSoup

from .errors import SourceReadError
from .urlset import UrlSet, URLSET_CLOSE

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

VALID_CHANGE_FREQUENCIES = [
    'always',
    'hourly',
    'daily',
    'weekly',
    'monthly',
    'yearly',
    'never',
]

HTTP_URL_RE = re.compile(r'^https?://', re.IGNORECASE)
LEADING_SLASH_RE = re.compile(r'^(?:\./|/)')


def escape_attr(value):
    return escape(str(value), {'"': '&quot;'})


def wrap_tag(tag, value):
    return f"<{tag}>{escape(str(value))}</{tag}>"


def format_lastmod(value):
    """Format a lastmod value as ISO-8601 UTC with milliseconds, e.g. 2024-01-31T12:00:00.000Z."""
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        moment = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        moment = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    else:
        raise TypeError(f"Unsupported lastmod value: {value!r}")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def create_image_sitemap(image_url):
    return f"<image:image><image:loc>{escape(image_url)}</image:loc></image:image>"


def get_images_url(entry, site_config):
    """Absolute URLs of every <img src> on the entry's page."""
    try:
        with open(entry.source, 'r', encoding='utf-8', errors='ignore') as f:
            soup = BeautifulSoup(f, 'html.parser')
    except OSError as e:
        raise SourceReadError(f"Could not read {entry.source} for image sitemap: {e}", entry.source) from e

    urls = []
    for img in soup.find_all('img', src=True):
        current_url = img['src'].strip()
        if not current_url or current_url.startswith('data:'):
            continue
        if current_url.startswith('//'):
            scheme = site_config.site_url.split(':', 1)[0]
            current_url = f"{scheme}:{current_url}"
        elif not HTTP_URL_RE.match(current_url):
            current_url = site_config.site_url + LEADING_SLASH_RE.sub('', current_url, count=1)
        urls.append(current_url)
    return urls


def generate_images_map(entry, site_config):
    return [create_image_sitemap(url) for url in get_images_url(entry, site_config)]


def process_entry(entry, site_config):
    spacing = site_config.spacing
    indent = spacing + spacing
    lines = [spacing + '<url>']

    loc = entry.get_loc.resolve(site_config.site_url, entry.loc, entry) if entry.get_loc is not None else entry.loc
    lines.append(indent + wrap_tag('loc', loc))
    if site_config.images:
        lines.extend(indent + image for image in generate_images_map(entry, site_config))

    if entry.lastmod is not None:
        lines.append(indent + wrap_tag('lastmod', format_lastmod(entry.lastmod)))

    if entry.changefreq:
        lines.append(indent + wrap_tag('changefreq', entry.changefreq))

    # 0 is a real priority, only None means absent
    priority = entry.priority.resolve(site_config.site_url, entry.loc, entry) if entry.priority is not None else None
    if priority is not None:
        lines.append(indent + wrap_tag('priority', priority))

    for item in entry.hreflang:
        href = item.href(site_config.site_url, entry.file, loc)
        lines.append(
            indent
            + f'<xhtml:link rel="alternate" hreflang="{escape_attr(item.lang)}" href="{escape_attr(href)}" />'
        )

    lines.append(spacing + '</url>')
    return site_config.new_line.join(lines)


def prepare_sitemap(entries, site_config, urlset=None):
    """
    Render the whole document. The urlset is reset afterwards so the same
    tracker can serve the next build; without one, a fresh tracker is used.
    """
    if urlset is None:
        urlset = UrlSet()
        if site_config.images:
            urlset.add_xmlns('image')
        if site_config.videos:
            urlset.add_xmlns('video')

    if any(entry.hreflang for entry in entries):
        urlset.add_xmlns('xhtml')

    try:
        lines = [XML_DECLARATION, urlset.get()]
        lines.extend(process_entry(entry, site_config) for entry in entries)
        lines.append(URLSET_CLOSE)
        return site_config.new_line.join(lines)
    finally:
        urlset.reset()


def is_changefreq_valid(changefreq):
    # empty changefreq is valid
    if not changefreq:
        return True
    return changefreq.lower() in VALID_CHANGE_FREQUENCIES
