"""Operation-specific renderers for ServiceResult.

Scenario results render as their protocol lines, byte for byte, and never
pass through Rich (which would wrap long lines).  Everything else renders
on a StringIO-backed Rich Console.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from dispatchkit.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from dispatchkit.services.result import ServiceResult

SCENARIO_OPS = frozenset({"observe", "price", "chat", "approve"})


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a string.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    if result.op in SCENARIO_OPS:
        return render_lines(result)

    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_lines(result: ServiceResult) -> str:
    """Protocol output of a scenario run, one line per emitted line."""
    return "\n".join(result.lines)


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if result.op in SCENARIO_OPS:
        return render_lines(result)
    if not result.ok:
        return error_line(result)
    strategies = result.data.get("strategies")
    if isinstance(strategies, list):
        return "\n".join(str(entry.get("name", "")) for entry in strategies)
    return f"OK: {result.op}"


def error_line(result: ServiceResult) -> str:
    msg = result.error.message if result.error else "Unknown error"
    return f"ERROR: {result.op} — {msg}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text("OK", style="dk.ok"), Text(result.op, style="dk.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}:", style="dk.key")
    console.print(k, Text(str(value)))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="dk.error")
    op = Text(f"  {result.op}", style="dk.op")
    console.print(label, op, Text(" — "), msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Catalog renderer ──────────────────────────────────────────────────


def _render_strategies(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Strategy", style="dk.name", no_wrap=True)
    table.add_column("Aliases", style="dk.alias")
    if verbose:
        table.add_column("Description")
    for entry in result.data.get("strategies", []):
        row = [str(entry.get("name", "")), ", ".join(entry.get("aliases", []))]
        if verbose:
            row.append(str(entry.get("description", "")))
        table.add_row(*row)
    console.print(table)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "strategies": _render_strategies,
}
