import os
from pathlib import Path


class PageFile:
    """
    One page handed to the sitemap pipeline by the build.

    contents is bytes, None for a file with no contents, or a readable stream
    object. Streams are rejected by the pipeline.
    """

    def __init__(self, path, base=None, cwd=None, contents=None, mtime=None, is_directory=False):
        self.cwd = os.path.abspath(cwd or os.getcwd())
        self.base = os.path.abspath(base or self.cwd)
        self.path = os.path.join(self.cwd, path)
        self.contents = contents
        self.mtime = mtime
        self.is_directory = is_directory

    @classmethod
    def from_path(cls, path, base=None, cwd=None):
        path = Path(path)
        stat = path.stat()
        if path.is_dir():
            return cls(str(path), base=base, cwd=cwd, mtime=stat.st_mtime, is_directory=True)
        return cls(str(path), base=base, cwd=cwd, contents=path.read_bytes(), mtime=stat.st_mtime)

    @property
    def relative(self):
        return os.path.relpath(self.path, self.base)

    @property
    def source(self):
        return self.path

    def is_stream(self):
        return self.contents is not None and not isinstance(self.contents, (bytes, bytearray)) \
            and hasattr(self.contents, 'read')

    def text(self):
        if self.contents is None or self.is_stream():
            return ''
        return bytes(self.contents).decode('utf-8', errors='ignore')

    def __repr__(self):
        return f"<PageFile {self.relative}>"


class OutputFile:
    """The synthesized sitemap document."""

    def __init__(self, path, contents, cwd=None, base=None):
        self.path = path
        self.contents = contents
        self.cwd = cwd
        self.base = base

    def write(self, destination=None):
        target = Path(destination or self.path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.contents)
        return target


IGNORE_PATHS = ('.git', 'node_modules', '__pycache__')


def collect_pages(root, patterns=('**/*.html',), ignore=IGNORE_PATHS):
    """Scan a built site directory for pages, in stable sorted order."""
    root = Path(root).resolve()
    seen = set()
    pages = []
    for pattern in patterns:
        for path in sorted(root.glob(pattern)):
            rel_parts = path.relative_to(root).parts
            if any(part in ignore for part in rel_parts):
                continue
            if path in seen or not path.is_file():
                continue
            seen.add(path)
            pages.append(PageFile.from_path(path, base=root, cwd=root))
    return pages
