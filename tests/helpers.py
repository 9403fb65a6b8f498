import os

from static_sitemap import PageFile, generate

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))


def make_page(path='fixtures/test.html', contents=b'hello there', **kwargs):
    return PageFile(path, base=TESTS_DIR, cwd=TESTS_DIR, contents=contents, **kwargs)


def render(files, **options):
    output = generate(files, **options)
    assert output is not None
    return output.contents.decode('utf-8')
