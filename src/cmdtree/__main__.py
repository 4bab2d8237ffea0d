from __future__ import annotations

from cmdtree.cli import main

if __name__ == "__main__":
    main()
