from __future__ import annotations

import json
import sys
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, cast

from rich.console import Console
from rich.table import Table

# Lightweight, reusable formatting utilities for tables and JSON output.


def run_with_status(message: str, fn: Callable[..., Any], *args, spinner: str = "dots", **kwargs) -> Any:
    """
    Run a callable while showing a transient Rich status indicator.
    Does not add sleeps; non-blocking visual only.
    """
    console = Console(stderr=True)
    with console.status(message, spinner=spinner):
        return fn(*args, **kwargs)


def print_json_data(data: Any, output: Optional[str] = None) -> None:
    """
    Print JSON data to stdout (if output is None, '-' or empty) or write to a file path.
    """
    if output is None or output in ("-", ""):
        json.dump(data, sys.stdout, indent=2, sort_keys=False, default=str)
        sys.stdout.write("\n")
        sys.stdout.flush()
        return
    path = cast(str, output)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=False, default=str)


def print_table(
    title: str,
    columns: Sequence[Dict[str, Any]],
    rows: Iterable[Dict[str, Any]],
    style_map: Optional[Dict[str, str]] = None,
    state_key: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Render a table given a list of column specs and row dicts.
    columns: list of dicts with keys:
      - header: str (column header)
      - key: str (field key to pull from each row)
      - no_wrap: bool (optional; default False)
    style_map: optional mapping of a cell value -> Rich style, applied to the state_key column
    """
    console = console or Console()
    table = Table(title=title, show_lines=False)
    for col in columns:
        table.add_column(str(col.get("header", "")), no_wrap=bool(col.get("no_wrap", False)))

    for r in rows:
        rendered: List[str] = []
        for col in columns:
            key = str(col.get("key", ""))
            val = r.get(key, "")
            if isinstance(val, list):
                val = ", ".join(str(x) for x in val)
            val_str = "" if val is None else str(val)
            if state_key and key == state_key and style_map:
                style = style_map.get(val_str)
                if style:
                    val_str = f"[{style}]{val_str}[/{style}]"
            rendered.append(val_str)
        table.add_row(*rendered)
    console.print(table)
