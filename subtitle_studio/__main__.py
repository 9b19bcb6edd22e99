"""Package entry point for ``python -m subtitle_studio``.

Delegates to the CLI's main().
"""

from subtitle_studio.cli import main

if __name__ == "__main__":
    main()
