from datetime import date, datetime, timedelta, timezone

import pytest

from static_sitemap import Entry, Fixed, HreflangLink, SiteConfig, SourceReadError, UrlSet
from static_sitemap.sitemap import (
    format_lastmod,
    is_changefreq_valid,
    prepare_sitemap,
    process_entry,
)
from tests.helpers import TESTS_DIR

SITE_URL = 'http://www.amazon.com'


def fixture_entry(name='test.html', **fields):
    return Entry(
        loc=f'{SITE_URL}/fixtures/{name}',
        file=f'fixtures/{name}',
        source=f'{TESTS_DIR}/fixtures/{name}',
        **fields,
    )


def test_process_entry_layout():
    config = SiteConfig(site_url=SITE_URL)
    entry = fixture_entry(
        lastmod=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        changefreq='weekly',
        priority=Fixed(0.8),
    )
    assert process_entry(entry, config).split('\n') == [
        '    <url>',
        '        <loc>http://www.amazon.com/fixtures/test.html</loc>',
        '        <lastmod>2024-01-02T03:04:05.000Z</lastmod>',
        '        <changefreq>weekly</changefreq>',
        '        <priority>0.8</priority>',
        '    </url>',
    ]


def test_custom_spacing_and_newline():
    config = SiteConfig(site_url=SITE_URL, spacing='\t', new_line='\r\n')
    rendered = process_entry(fixture_entry(), config)
    assert rendered == '\t<url>\r\n\t\t<loc>http://www.amazon.com/fixtures/test.html</loc>\r\n\t</url>'


def test_priority_zero_is_rendered():
    config = SiteConfig(site_url=SITE_URL)
    assert '<priority>0</priority>' in process_entry(fixture_entry(priority=Fixed(0)), config)


def test_changefreq_rendered_verbatim():
    config = SiteConfig(site_url=SITE_URL)
    assert '<changefreq>Sometimes</changefreq>' in process_entry(fixture_entry(changefreq='Sometimes'), config)


def test_values_are_escaped():
    config = SiteConfig(site_url=SITE_URL)
    entry = Entry(loc=f'{SITE_URL}/search?a=1&b=2', file='search', source='search')
    assert '<loc>http://www.amazon.com/search?a=1&amp;b=2</loc>' in process_entry(entry, config)


def test_hreflang_uses_loc_after_get_loc():
    calls = []

    def get_href(site_url, file, lang, loc):
        calls.append((site_url, file, lang, loc))
        return f'{loc}?lang={lang}'

    config = SiteConfig(site_url=SITE_URL)
    entry = fixture_entry(
        get_loc=Fixed('http://www.amazon.com/custom'),
        hreflang=[HreflangLink('fr', get_href)],
    )
    rendered = process_entry(entry, config)

    assert '<loc>http://www.amazon.com/custom</loc>' in rendered
    assert '<xhtml:link rel="alternate" hreflang="fr" href="http://www.amazon.com/custom?lang=fr" />' in rendered
    assert calls == [('http://www.amazon.com/', 'fixtures/test.html', 'fr', 'http://www.amazon.com/custom')]


def test_images_are_mapped():
    config = SiteConfig(site_url=SITE_URL, images=True)
    contents = prepare_sitemap([fixture_entry('images.html')], config)

    assert ('<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9" '
            'xmlns:image="http://www.google.com/schemas/sitemap-image/1.1">') in contents
    for url in [
        'https://via.placeholder.com/300/09f/fff.png',
        'http://www.amazon.com/assets/images/placeholder.jpg',
        'https://via.placeholder.com/300/09f/000.png',
        'https://via.placeholder.com/300/09f/f5f.png',
        'http://www.amazon.com/assets/images/placeholder_small.jpg',
        'http://www.amazon.com/assets/images/placeholder-responsive@250.jpg',
        'http://www.amazon.com/assets/images/placeholder.jpg?cache=1&amp;id=2',
    ]:
        assert f'<image:loc>{url}</image:loc>' in contents
    assert 'data:image' not in contents


def test_images_follow_loc():
    config = SiteConfig(site_url=SITE_URL, images=True)
    lines = process_entry(fixture_entry('images.html'), config).split('\n')
    assert lines[1].strip().startswith('<loc>')
    assert lines[2].strip().startswith('<image:image><image:loc>')


def test_no_images_no_image_blocks():
    config = SiteConfig(site_url=SITE_URL, images=True)
    contents = prepare_sitemap([fixture_entry('test.html')], config)
    assert '<image:image>' not in contents
    assert '<image:loc>' not in contents
    assert 'xmlns:image=' in contents


def test_unreadable_source_is_fatal_with_images():
    config = SiteConfig(site_url=SITE_URL, images=True)
    with pytest.raises(SourceReadError):
        process_entry(fixture_entry('does-not-exist.html'), config)


def test_videos_namespace():
    config = SiteConfig(site_url=SITE_URL, videos=True)
    contents = prepare_sitemap([fixture_entry('videos.html')], config)
    assert ('<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9" '
            'xmlns:video="http://www.google.com/schemas/sitemap-video/1.1">') in contents


def test_document_shape():
    config = SiteConfig(site_url=SITE_URL)
    contents = prepare_sitemap([fixture_entry('a.html'), fixture_entry('b.html')], config)
    lines = contents.split('\n')
    assert lines[0] == '<?xml version="1.0" encoding="UTF-8"?>'
    assert lines[1] == '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
    assert lines[-1] == '</urlset>'
    assert contents.index('fixtures/a.html') < contents.index('fixtures/b.html')


def test_prepare_sitemap_resets_urlset():
    urlset = UrlSet()
    urlset.add_xmlns('image')
    config = SiteConfig(site_url=SITE_URL)
    entry = fixture_entry(hreflang=[HreflangLink('de', 'http://www.amazon.de/')])

    contents = prepare_sitemap([entry], config, urlset)

    assert 'xmlns:image=' in contents
    assert 'xmlns:xhtml=' in contents
    assert urlset.attributes == ['sitemap']
    assert 'xmlns:xhtml=' not in prepare_sitemap([fixture_entry()], config, urlset)


@pytest.mark.parametrize('value, expected', [
    (datetime(2024, 1, 2, 3, 4, 5), '2024-01-02T03:04:05.000Z'),
    (datetime(2024, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2))), '2024-01-02T03:04:05.000Z'),
    (date(2024, 1, 2), '2024-01-02T00:00:00.000Z'),
    (0, '1970-01-01T00:00:00.000Z'),
    (1.5, '1970-01-01T00:00:01.500Z'),
    ('2024-01-02T03:04:05Z', '2024-01-02T03:04:05.000Z'),
    ('2026-01-31', '2026-01-31T00:00:00.000Z'),
])
def test_format_lastmod(value, expected):
    assert format_lastmod(value) == expected


@pytest.mark.parametrize('changefreq, valid', [
    (None, True),
    ('', True),
    ('daily', True),
    ('WEEKLY', True),
    ('Never', True),
    ('sometimes', False),
])
def test_is_changefreq_valid(changefreq, valid):
    assert is_changefreq_valid(changefreq) is valid


def test_entry_accepts_plain_values():
    config = SiteConfig(site_url=SITE_URL)
    assert '<priority>0</priority>' in process_entry(fixture_entry(priority=0), config)
    assert '<priority>0.5</priority>' in process_entry(fixture_entry(priority=0.5), config)

    rendered = process_entry(fixture_entry(get_loc=lambda site_url, loc, entry: site_url + 'custom'), config)
    assert '<loc>http://www.amazon.com/custom</loc>' in rendered


def test_entry_hreflang_from_dicts():
    config = SiteConfig(site_url=SITE_URL)
    entry = fixture_entry(hreflang=[{'lang': 'de', 'get_href': 'http://www.amazon.de/'}])
    assert 'hreflang="de" href="http://www.amazon.de/"' in process_entry(entry, config)
