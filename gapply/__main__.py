"""Allow running as ``python -m gapply``."""

from gapply.cli.main import main

if __name__ == "__main__":
    main()
