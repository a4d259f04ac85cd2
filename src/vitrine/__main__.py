"""``python -m vitrine [PORT]``."""

from vitrine.cli import main

if __name__ == "__main__":
    main()
