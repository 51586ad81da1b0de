"""Entry point: python -m jira_chores"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
