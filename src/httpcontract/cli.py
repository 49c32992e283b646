from __future__ import annotations

import importlib
import json
from typing import Any, Optional, get_args

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from httpcontract.contract.parser import ContractParser
from httpcontract.contract.strategies import STRATEGIES
from httpcontract.domain.metadata import MethodMetadata
from httpcontract.errors import ContractError
from httpcontract.log import configure_logging
from httpcontract.settings import ContractSettings

__version__ = "0.1.0"

app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()


def load_target(spec: str) -> Any:
    """Resolve "package.module:ClassName"."""
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter(f"Expected MODULE:CLASS, got: {spec}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"Cannot import {module_name}: {exc}") from exc

    target: Any = module
    for part in attr.split("."):
        if not hasattr(target, part):
            raise typer.BadParameter(f"{module_name} has no attribute {attr}")
        target = getattr(target, part)
    return target


def _type_label(tp: Any) -> Optional[str]:
    if tp is None:
        return None
    if isinstance(tp, type) and not get_args(tp):
        return tp.__name__
    return str(tp)


def describe(md: MethodMetadata) -> dict[str, Any]:
    t = md.template
    body: Optional[str] = None
    if t.body is not None:
        body = t.body.decode("utf-8", errors="replace")
    return {
        "config_key": md.config_key,
        "method": t.method,
        "url": t.url,
        "headers": {k: list(v) for k, v in t.headers.items()},
        "queries": {k: list(v) for k, v in t.queries.items()},
        "body": body,
        "body_template": t.body_template,
        "body_index": md.body_index,
        "body_type": _type_label(md.body_type),
        "url_index": md.url_index,
        "index_to_name": {str(i): list(names) for i, names in md.index_to_name.items()},
        "form_params": list(md.form_params),
        "index_to_expander": {str(i): _type_label(e) for i, e in md.index_to_expander.items()},
    }


def _multimap(values: dict[str, tuple[Optional[str], ...]]) -> str:
    lines = []
    for name, vals in values.items():
        rendered = ", ".join("<flag>" if v is None else v for v in vals)
        lines.append(f"{name}: {rendered}")
    return "\n".join(lines)


def _bindings(md: MethodMetadata) -> str:
    lines = [f"{i} -> {', '.join(names)}" for i, names in md.index_to_name.items()]
    if md.url_index is not None:
        lines.append(f"{md.url_index} -> <url>")
    if md.body_index is not None:
        lines.append(f"{md.body_index} -> <body {_type_label(md.body_type)}>")
    if md.form_params:
        lines.append(f"form: {', '.join(md.form_params)}")
    return "\n".join(lines)


@app.command()
def show(
    target: str = typer.Argument(..., help="Interface to parse, as MODULE:CLASS"),
    style: Optional[str] = typer.Option(None, help="Annotation style: auto|verb|request-line"),
    format: str = typer.Option("table", help="Output format: table|json"),
    log_level: Optional[str] = typer.Option(None, help="Log level (default from HTTPCONTRACT_LOG_LEVEL)"),
) -> None:
    settings = ContractSettings()
    configure_logging(log_level or settings.log_level)

    if style is not None:
        style = style.lower().strip()
        if style != "auto" and style not in STRATEGIES:
            raise typer.BadParameter("style must be one of: auto, verb, request-line")
        settings = settings.model_copy(update={"default_style": style})

    fmt = format.lower().strip()
    if fmt not in ("table", "json"):
        raise typer.BadParameter("format must be one of: table, json")

    iface = load_target(target)
    try:
        metadata = ContractParser(settings=settings).parse(iface)
    except ContractError as exc:
        console.print(f"[bold red]contract error[/bold red] {type(exc).__name__}: {escape(str(exc))}")
        raise typer.Exit(code=1)

    if fmt == "json":
        console.print_json(json.dumps([describe(md) for md in metadata]))
        return

    table = Table(show_header=True, header_style="bold", title=escape(target))
    table.add_column("CONFIG KEY")
    table.add_column("METHOD", no_wrap=True)
    table.add_column("URL")
    table.add_column("QUERIES")
    table.add_column("HEADERS")
    table.add_column("BINDINGS")

    for md in metadata:
        table.add_row(
            escape(md.config_key),
            md.template.method or "",
            escape(md.template.url),
            escape(_multimap(md.template.queries)),
            escape(_multimap(md.template.headers)),
            escape(_bindings(md)),
        )

    console.print(table)
    console.print(f"Methods parsed: [bold]{len(metadata)}[/bold]")


@app.command()
def version() -> None:
    console.print(f"httpcontract {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
