URLSET_OPEN = '<urlset'
URLSET_CLOSE = '</urlset>'

XML_NAMESPACE = {
    'sitemap': 'xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"',
    'xhtml': 'xmlns:xhtml="http://www.w3.org/1999/xhtml"',
    'image': 'xmlns:image="http://www.google.com/schemas/sitemap-image/1.1"',
    'video': 'xmlns:video="http://www.google.com/schemas/sitemap-video/1.1"',
}

DEFAULT_ATTRIBUTES = ['sitemap']


class UrlSet:
    """Tracks which namespaces the <urlset> root element has to declare."""

    def __init__(self):
        self.attributes = list(DEFAULT_ATTRIBUTES)

    def get(self):
        return URLSET_OPEN + ''.join(f" {XML_NAMESPACE[name]}" for name in self.attributes) + '>'

    def add_xmlns(self, name):
        # unknown names and duplicates are ignored
        if name in XML_NAMESPACE and name not in self.attributes:
            self.attributes.append(name)
            return True
        return False

    def reset(self):
        self.attributes = list(DEFAULT_ATTRIBUTES)
