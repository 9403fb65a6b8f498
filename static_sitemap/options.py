"""
Configuration for a sitemap build.

Options arrive as plain keyword arguments (or dicts loaded from JSON) and are
normalised once into a SiteConfig. Values that may be either a constant or a
callback (get_loc, priority, lastmod, get_href) are wrapped as Fixed or
Computed here, so the rest of the pipeline only ever calls .resolve().
"""
from wcmatch import glob

from .errors import ConfigurationError

ALLOWED_PROPERTIES = ('get_loc', 'lastmod', 'priority', 'changefreq', 'hreflang')

DEPRECATED_OPTIONS = {
    'change_freq': 'changefreq',
    'changeFreq': 'changefreq',
}

SITE_DEFAULTS = {
    'changefreq': None,
    'file_name': 'sitemap.xml',
    'lastmod': None,
    'mappings': [],
    'new_line': '\n',
    'priority': None,
    'spacing': '    ',
    'verbose': False,
    'noindex': False,
    'index_replace': ['html'],
    'expand': {},
    'images': False,
    'videos': False,
    'get_loc': None,
    'hreflang': None,
}

GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.EXTGLOB | glob.CASE


class Fixed:
    """An option holding a plain value."""

    def __init__(self, value):
        self.value = value

    def resolve(self, *context):
        return self.value

    def __repr__(self):
        return f"Fixed({self.value!r})"


class Computed:
    """An option computed by a callback from positional context."""

    def __init__(self, fn):
        self.fn = fn

    def resolve(self, *context):
        return self.fn(*context)

    def __repr__(self):
        return f"Computed({getattr(self.fn, '__name__', self.fn)!r})"


def as_option(value):
    if isinstance(value, (Fixed, Computed)):
        return value
    if callable(value):
        return Computed(value)
    return Fixed(value)


class HreflangLink:
    """An alternate-language link. get_href(site_url, file, lang, loc) -> href."""

    def __init__(self, lang, get_href):
        if not lang:
            raise ConfigurationError("hreflang items need a 'lang'")
        self.lang = lang
        self.get_href = as_option(get_href)

    @classmethod
    def from_config(cls, item):
        if isinstance(item, cls):
            return item
        try:
            return cls(item['lang'], item['get_href'])
        except (KeyError, TypeError):
            raise ConfigurationError(f"Invalid hreflang item: {item!r}") from None

    def href(self, site_url, file, loc):
        return self.get_href.resolve(site_url, file, self.lang, loc)


def normalize_property(name, value):
    if name in ('get_loc', 'priority', 'lastmod'):
        if name != 'lastmod' and value is None:
            return None
        return as_option(value)
    if name == 'hreflang':
        return [HreflangLink.from_config(item) for item in (value or [])]
    return value


class MappingRule:
    """
    Per-page overrides of the sitewide defaults.

    Only fields passed explicitly count as set; an unset field falls through
    to the site config. Passing lastmod=None is a real override meaning
    "use the file's modification time".
    """

    def __init__(self, pages, **fields):
        if isinstance(pages, str):
            pages = [pages]
        if not pages:
            raise ConfigurationError("Mapping rules need at least one pattern in 'pages'")
        unknown = set(fields) - set(ALLOWED_PROPERTIES)
        if unknown:
            raise ConfigurationError(f"Unknown mapping option(s): {', '.join(sorted(unknown))}")
        self.pages = list(pages)
        self.fields = {name: normalize_property(name, value) for name, value in fields.items()}

    @classmethod
    def from_config(cls, rule):
        if isinstance(rule, cls):
            return rule
        if not isinstance(rule, dict) or 'pages' not in rule:
            raise ConfigurationError(f"Invalid mapping rule: {rule!r}")
        fields = dict(rule)
        pages = fields.pop('pages')
        return cls(pages, **fields)

    def matches(self, relative_path):
        # patterns apply in order: a later pattern can re-include what a "!" pattern removed
        matched = False
        for pattern in self.pages:
            if pattern.startswith('!'):
                if matched and glob.globmatch(relative_path, pattern[1:], flags=GLOB_FLAGS):
                    matched = False
            elif not matched and glob.globmatch(relative_path, pattern, flags=GLOB_FLAGS):
                matched = True
        return matched


class SiteConfig:
    def __init__(self, **options):
        for old, new in DEPRECATED_OPTIONS.items():
            if old in options:
                raise ConfigurationError(f"{old} has been deprecated. Please use {new}")

        site_url = options.pop('site_url', None)
        if not site_url:
            raise ConfigurationError("site_url is a required param")

        unknown = set(options) - set(SITE_DEFAULTS)
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(unknown))}")

        config = dict(SITE_DEFAULTS)
        config.update(options)

        # site url should have a trailing slash
        if not site_url.endswith('/'):
            site_url = site_url + '/'
        self.site_url = site_url

        self.file_name = config['file_name']
        self.spacing = config['spacing']
        self.new_line = config['new_line']
        self.verbose = bool(config['verbose'])
        self.noindex = bool(config['noindex'])
        self.images = bool(config['images'])
        self.videos = bool(config['videos'])

        index_replace = config['index_replace'] or []
        if isinstance(index_replace, str):
            index_replace = [index_replace]
        self.index_replace = list(index_replace)

        self.expand = self._load_expand(config['expand'] or {})
        self.mappings = [MappingRule.from_config(rule) for rule in config['mappings'] or []]

        # lastmod is always set (None means file mtime); the rest only when given
        self.defaults = {'lastmod': normalize_property('lastmod', config['lastmod'])}
        for name in ('get_loc', 'priority', 'changefreq', 'hreflang'):
            if config[name] is not None:
                self.defaults[name] = normalize_property(name, config[name])

    @staticmethod
    def _load_expand(expand):
        rules = {}
        for path, rule in expand.items():
            if not isinstance(rule, dict) or 'data_file' not in rule or 'key' not in rule:
                raise ConfigurationError(f"expand rule for '{path}' needs 'data_file' and 'key'")
            rules[path.replace('\\', '/')] = {'data_file': rule['data_file'], 'key': rule['key']}
        return rules

    def find_mapping(self, relative_path):
        """First matching rule wins; later matches are ignored."""
        for rule in self.mappings:
            if rule.matches(relative_path):
                return rule
        return None

    def merged_fields(self, relative_path):
        rule = self.find_mapping(relative_path)
        fields = dict(self.defaults)
        if rule is not None:
            fields.update(rule.fields)
        return fields
