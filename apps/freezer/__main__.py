from __future__ import annotations

from apps.freezer.cli import main

if __name__ == "__main__":
    main()
