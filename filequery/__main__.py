"""Module entrypoint for ``python -m filequery``.

All argument parsing and runtime setup happen in ``filequery.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
