"""Allow ``python -m ye_olde_todos``."""

from .cli import main

if __name__ == "__main__":
    main()
