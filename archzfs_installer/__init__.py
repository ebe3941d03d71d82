"""Arch Linux root-on-ZFS installer (interactive, staged).

Core design goals:
- Fixed stage order, fail fast on the first failed command
- Shell recipes kept as data (recipes.yaml), filled in per stage
- One exit path; everything below main() returns outcomes
- Centralized logging
"""

__all__ = []
