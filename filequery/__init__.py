"""Public package surface for filequery.

Exports ``main`` for programmatic CLI invocation.
The entry cache lives in ``filequery.entries``, table layout in
``filequery.table`` and the renderers in ``filequery.views``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
