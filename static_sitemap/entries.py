import json
import os
import posixpath
import re
import time

from .errors import ExpandDataError
from .options import Fixed, normalize_property


class Entry:
    """One <url> row of the sitemap."""

    def __init__(self, loc, file, source, lastmod=None, changefreq=None, priority=None,
                 get_loc=None, hreflang=None):
        self.loc = loc
        self.file = file
        self.source = source
        self.lastmod = lastmod
        self.changefreq = changefreq
        self.priority = normalize_property('priority', priority)
        self.get_loc = normalize_property('get_loc', get_loc)
        self.hreflang = normalize_property('hreflang', hreflang)

    def __repr__(self):
        return f"<Entry {self.loc}>"


def normalize_path(path):
    # windows separators -> /
    return path.replace('\\', '/')


def collapse_index(normalized_path, index_replace):
    """
    Turn index.<ext> into a directory URL:
    a/b/index.html -> a/b/ and index.html -> '' (site root).
    """
    for ext in index_replace:
        match = re.match(rf'^(.*)(/|^)index\.{re.escape(ext)}$', normalized_path)
        if match:
            normalized_path = '' if match.group(1) == '' else match.group(1) + '/'
    return normalized_path


def expand_path(normalized_path, url_extension):
    """
    Swap the page's own file name for an expand value:
    videos/ -> videos/<value>, videos.php -> videos/<value>.
    """
    if not normalized_path or normalized_path.endswith('/'):
        return f"{normalized_path}{url_extension}"
    stem = posixpath.splitext(normalized_path)[0]
    return f"{stem}/{url_extension}"


def resolve_lastmod(option, file):
    if option is None:
        return None
    if isinstance(option, Fixed):
        if option.value is None:
            # calculate mtime manually
            return file.mtime if file.mtime is not None else time.time()
        if option.value is False:
            return None
        return option.value
    value = option.resolve(file)
    return None if value is False else value


def get_entry_config(file, site_config, urlset=None, url_extension=None):
    relative_path = normalize_path(file.relative)
    fields = site_config.merged_fields(relative_path)

    if urlset is not None:
        if site_config.images:
            urlset.add_xmlns('image')
        if site_config.videos:
            urlset.add_xmlns('video')

    normalized_path = collapse_index(relative_path, site_config.index_replace)
    if url_extension is not None:
        normalized_path = expand_path(normalized_path, url_extension)

    return Entry(
        loc=site_config.site_url + normalized_path,
        file=normalized_path,
        source=file.source,
        lastmod=resolve_lastmod(fields.get('lastmod'), file),
        changefreq=fields.get('changefreq'),
        priority=fields.get('priority'),
        get_loc=fields.get('get_loc'),
        hreflang=fields.get('hreflang'),
    )


def load_expand_data(rule, cwd):
    data_file = os.path.join(cwd, rule['data_file'])
    try:
        with open(data_file, 'r', encoding='utf-8') as f:
            records = json.load(f)
    except OSError as e:
        raise ExpandDataError(f"Could not read expand data {data_file}: {e}", data_file) from e
    except ValueError as e:
        raise ExpandDataError(f"Invalid JSON in expand data {data_file}: {e}", data_file) from e

    if not isinstance(records, list):
        raise ExpandDataError(f"Expand data {data_file} must be a JSON array", data_file)

    key = rule['key']
    values = []
    for record in records:
        if not isinstance(record, dict) or key not in record:
            raise ExpandDataError(f"Record without '{key}' in expand data {data_file}", data_file)
        values.append(record[key])
    return values


def expand_entries(file, site_config, urlset=None):
    """Create one entry per record of the page's expand data file."""
    rule = site_config.expand[normalize_path(file.relative)]
    return [
        get_entry_config(file, site_config, urlset, url_extension=value)
        for value in load_expand_data(rule, file.cwd)
    ]


def resolve(file, site_config, urlset=None):
    """Entries for one page: several in expand mode, otherwise exactly one."""
    if normalize_path(file.relative) in site_config.expand:
        return expand_entries(file, site_config, urlset)
    return [get_entry_config(file, site_config, urlset)]
