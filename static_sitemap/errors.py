PLUGIN_NAME = 'static-sitemap'


class SitemapError(Exception):
    """Base error for everything the sitemap pipeline raises."""

    def __init__(self, msg):
        super().__init__(f"{PLUGIN_NAME}: {msg}")
        self.msg = msg


class ConfigurationError(SitemapError):
    """Missing site_url or a deprecated option was used."""


class UnsupportedInputError(SitemapError):
    """A streaming input file reached the pipeline."""


class ExpandDataError(SitemapError):
    """The data file behind an expand rule could not be read or parsed."""

    def __init__(self, msg, data_file=None):
        super().__init__(msg)
        self.data_file = data_file


class SourceReadError(SitemapError):
    """The page behind an entry could not be read for image scraping."""

    def __init__(self, msg, source=None):
        super().__init__(msg)
        self.source = source
