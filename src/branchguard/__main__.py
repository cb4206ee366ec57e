"""Allow ``python -m branchguard``; the installed hook shims rely on it."""

from .cli import main

if __name__ == "__main__":
    main()
