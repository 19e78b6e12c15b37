"""
CLI module - unified command-line interface.

Provides entry points for:
- Viewing one assembled blog page and its parts
- Listing the collection
- Checking content integrity
"""

from blog_pipeline.cli.commands import (
    main,
    run_show_cli,
    run_outline_cli,
    run_related_cli,
    run_nav_cli,
    run_list_cli,
    run_check_cli,
)

__all__ = [
    "main",
    "run_show_cli",
    "run_outline_cli",
    "run_related_cli",
    "run_nav_cli",
    "run_list_cli",
    "run_check_cli",
]
