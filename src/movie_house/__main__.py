"""Entry point for ``python -m movie_house``."""

import sys

from movie_house.app import main

if __name__ == "__main__":
    sys.exit(main())
