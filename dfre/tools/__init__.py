"""Command-line tools. Each module exposes main(argv=None) -> exit code."""

import logging
import os

from ..catalog import open_catalog


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s')


def load_input(path: str, archive: str = None):
    """Return (name, data) for a loose file, or an entry of archive."""
    if archive is None:
        with open(path, 'rb') as f:
            return os.path.basename(path), f.read()

    catalog = open_catalog(archive)
    entry = catalog.find(path)
    with open(archive, 'rb') as f:
        return entry.name, catalog.read(f, entry)
