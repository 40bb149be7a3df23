"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from printzone.output.console import create_console, get_output, style_for_source

if TYPE_CHECKING:
    from rich.console import Console

    from printzone.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: the resolved URL(s)."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if result.op == "plan_batch" and isinstance(items, list):
        return "\n".join(str(item.get("url") or "") for item in items)

    url = result.data.get("url")
    if url:
        return str(url)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _fmt(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="pz.ok")
    op = Text(f"  {result.op}", style="pz.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any, style: str = "") -> None:
    k = Text(f"  {key}: ", style="pz.key")
    v = Text(_fmt(value), style=style)
    console.print(k, v, end="")
    console.print()


def _rect_text(rect: dict[str, Any] | None) -> str:
    if not rect:
        return "-"
    text = f"({rect['x']:.1f}, {rect['y']:.1f}) {rect['width']:.1f}x{rect['height']:.1f}"
    if rect.get("rotation_degrees"):
        text += f" @ {rect['rotation_degrees']:.1f}°"
    return text


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_span(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    prefix = " " * indent
    line = f"{prefix}[dim]{span.get('duration_ms', 0.0):>8.3f}ms[/dim]  {span.get('name', '?')}"
    annotations = span.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


def _render_warnings_inline(console: Console, result: ServiceResult) -> None:
    fallback = result.data.get("fallback")
    if fallback:
        _field(console, "fallback", fallback, style="pz.warning")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pz.error")
    op = Text(f"  {result.op}", style="pz.op")
    console.print(label, op, Text(" — "), msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Op renderers ──────────────────────────────────────────────────────


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "url", d.get("url"), style="pz.url")
    source = d.get("source_kind")
    _field(console, "source", source or "placeholder", style=style_for_source(source))
    for key in ("view_label", "color_variant_id", "image_id"):
        if d.get(key) is not None:
            _field(console, key, d[key])
    _render_warnings_inline(console, result)
    if verbose:
        _render_meta(console, result)


def _render_plan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _render_resolve(result, console, verbose=False)
    d = result.data
    if d.get("rendered_size"):
        size = d["rendered_size"]
        _field(console, "rendered", f"{size['width']:.1f}x{size['height']:.1f}")
    if d.get("image_box"):
        _field(console, "image_box", _rect_text(d["image_box"]))
    zone = d.get("zone")
    if zone:
        _field(console, "zone", f"{zone.get('name') or zone.get('id')}  {_rect_text(zone['rect'])}")

    overlay = d.get("overlay")
    if overlay:
        p = overlay["placement"]
        table = Table(show_header=True, pad_edge=False, expand=False)
        for col in ("offset x", "offset y", "width", "height", "rotation", "scale", "bleeds"):
            table.add_column(col.title(), style="pz.num", justify="right")
        table.add_row(
            f"{p['offset_x']:.2f}",
            f"{p['offset_y']:.2f}",
            f"{p['rendered_width']:.2f}",
            f"{p['rendered_height']:.2f}",
            f"{p['rotation_degrees']:.1f}",
            f"{overlay['scale']:.3f}",
            "yes" if overlay.get("bleeds") else "no",
        )
        console.print()
        console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_batch(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "count", result.data.get("count", 0))
    _field(console, "fallbacks", result.data.get("fallback_count", 0))

    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Color")
    table.add_column("URL", style="pz.url")
    table.add_column("Offset", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Fallback", style="pz.warning")
    for item in result.data.get("items", []):
        overlay = item.get("overlay")
        offset = size = "-"
        if overlay:
            p = overlay["placement"]
            offset = f"{p['offset_x']:.1f}, {p['offset_y']:.1f}"
            size = f"{p['rendered_width']:.1f}x{p['rendered_height']:.1f}"
        table.add_row(
            str(item.get("color") or item.get("color_variant_id") or "default"),
            str(item.get("url") or ""),
            offset,
            size,
            str(item.get("fallback") or ""),
        )
    console.print()
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "zones", d.get("count", 0))
    _field(console, "errors", d.get("error_count", 0))
    _field(console, "warnings", d.get("warning_count", 0))
    _field(console, "healthy", d.get("healthy", True))

    items = d.get("items", [])
    if items:
        table = Table(show_header=True, pad_edge=False, expand=False)
        table.add_column("Image")
        table.add_column("Zone")
        table.add_column("Rect", justify="right")
        table.add_column("Issues")
        for item in items:
            issues = [f"[pz.error]{e}[/pz.error]" for e in item["errors"]]
            issues += [f"[pz.warning]{w}[/pz.warning]" for w in item["warnings"]]
            table.add_row(
                str(item.get("view") or item.get("image_id") or "-"),
                str(item.get("zone")),
                _rect_text(item.get("rect")),
                "\n".join(issues) or "ok",
            )
        console.print()
        console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "resolve_image": _render_resolve,
    "plan_overlay": _render_plan,
    "plan_batch": _render_batch,
    "check_zones": _render_check,
}
