"""CLI for restform."""

import json
from pathlib import Path
from typing import Annotated, Any
from urllib.parse import urljoin, urlparse

import typer
from rich.console import Console
from rich.table import Table

from restform import __version__
from restform.config import ConfigurationError, load_options
from restform.factory import bind_form
from restform.models import Severity, TransportResponse
from restform.serialization import serialize
from restform.transport import RequestsTransport
from restform.view import FormNotFoundError, HtmlFormView

app = typer.Typer(
    name="restform",
    help="Submit HTML forms to REST endpoints and render the response errors.",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"restform version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """restform: submit HTML forms to REST endpoints."""
    pass


def _parse_pairs(pairs: list[str] | None, option: str) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            console.print(f"[red]Error:[/red] {option} expects name=value, got {pair!r}")
            raise typer.Exit(1)
        parsed[name] = value
    return parsed


def _load_view(form_path: Path, form_id: str | None, values: list[str] | None) -> HtmlFormView:
    if not form_path.exists():
        console.print(f"[red]Error:[/red] Form file not found: {form_path}")
        raise typer.Exit(1)

    try:
        view = HtmlFormView.from_html(form_path.read_text(), form_id=form_id)
    except FormNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    for name, value in _parse_pairs(values, "--set").items():
        view.set_value(name, value)
    return view


def _load_overrides(options_path: Path | None) -> dict[str, Any]:
    if options_path is None:
        return {}
    if not options_path.exists():
        console.print(f"[red]Error:[/red] Options file not found: {options_path}")
        raise typer.Exit(1)
    try:
        return load_options(options_path)
    except ConfigurationError as e:
        console.print(f"[red]Invalid options:[/red] {e}")
        raise typer.Exit(1)

def _build_overrides(
    options_path: Path | None,
    url: str | None = None,
    method: str | None = None,
    exclude: list[str] | None = None,
    data: list[str] | None = None,
    timeout_ms: int | None = None,
) -> dict[str, Any]:
    """Layer command-line options over the options file."""
    overrides = _load_overrides(options_path)

    if url:
        overrides["endpoint_url"] = url
    if method:
        overrides["http_method"] = method
    if exclude:
        overrides["excluded_field_names"] = set(overrides.get("excluded_field_names", [])) | set(exclude)
    if data:
        overrides["extra_static_data"] = {
            **overrides.get("extra_static_data", {}),
            **_parse_pairs(data, "--data"),
        }
    if timeout_ms is not None:
        overrides["timeout_ms"] = timeout_ms
    return overrides


def _absolute_endpoint(endpoint_url: str, base_url: str | None) -> str:
    """Resolve a relative form action against ``base_url``."""
    if urlparse(endpoint_url).scheme in ("http", "https"):
        return endpoint_url
    if base_url is None:
        console.print(
            f"[red]Error:[/red] Endpoint {endpoint_url!r} is not an absolute http(s) URL. "
            "Pass --url or --base-url."
        )
        raise typer.Exit(1)
    return urljoin(base_url, endpoint_url)


FormPath = Annotated[Path, typer.Argument(help="HTML file containing the form")]
FormId = Annotated[
    str | None,
    typer.Option("--form-id", help="id of the form to use (default: first form)"),
]
SetValues = Annotated[
    list[str] | None,
    typer.Option("--set", "-s", help="Field value as name=value (repeatable)"),
]
Url = Annotated[
    str | None,
    typer.Option("--url", "-u", help="Endpoint URL (default: form action)"),
]
Method = Annotated[
    str | None,
    typer.Option("--method", "-m", help="HTTP method (default: form method)"),
]
Exclude = Annotated[
    list[str] | None,
    typer.Option("--exclude", "-x", help="Field name to leave out (repeatable)"),
]
StaticData = Annotated[
    list[str] | None,
    typer.Option("--data", "-d", help="Extra static value as key=value (repeatable)"),
]
OptionsPath = Annotated[
    Path | None,
    typer.Option("--options", envvar="RESTFORM_OPTIONS", help="YAML options file"),
]


@app.command()
def payload(
    form_path: FormPath,
    form_id: FormId = None,
    values: SetValues = None,
    url: Url = None,
    method: Method = None,
    exclude: Exclude = None,
    data: StaticData = None,
    options_path: OptionsPath = None,
) -> None:
    """Print the payload a submit would send, without sending it."""
    view = _load_view(form_path, form_id, values)
    overrides = _build_overrides(options_path, url, method, exclude, data)

    transport = RequestsTransport()
    try:
        controller = bind_form(view, transport, overrides)
        body = serialize(controller.collect_payload(), controller.config.serialize_data)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    finally:
        transport.close()
    console.print_json(body.decode("utf-8"))


@app.command()
def submit(
    form_path: FormPath,
    form_id: FormId = None,
    values: SetValues = None,
    url: Url = None,
    base_url: Annotated[
        str | None,
        typer.Option(
            "--base-url",
            envvar="RESTFORM_BASE_URL",
            help="Base URL for a relative form action",
        ),
    ] = None,
    method: Method = None,
    exclude: Exclude = None,
    data: StaticData = None,
    timeout_ms: Annotated[
        int | None,
        typer.Option("--timeout-ms", envvar="RESTFORM_TIMEOUT_MS", help="Request timeout"),
    ] = None,
    options_path: OptionsPath = None,
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Write the re-rendered HTML here"),
    ] = None,
) -> None:
    """Submit a form and render the endpoint's response onto it."""
    view = _load_view(form_path, form_id, values)
    overrides = _build_overrides(options_path, url, method, exclude, data, timeout_ms)

    def on_after_error(reason: str, severity: Severity, response: TransportResponse) -> None:
        console.print(
            f"[yellow]Submission failed:[/yellow] {reason} "
            f"(severity {int(severity)}, status {response.status})"
        )

    transport = RequestsTransport()
    try:
        controller = bind_form(
            view,
            transport,
            overrides,
            call_later=lambda delay, callback: callback(),
            on_after_error=on_after_error,
        )
    except ConfigurationError as e:
        transport.close()
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    endpoint_url = controller.config.endpoint_url
    try:
        absolute_url = _absolute_endpoint(endpoint_url, base_url)
    except typer.Exit:
        transport.close()
        raise
    if absolute_url != endpoint_url:
        controller.reconfigure(endpoint_url=absolute_url)

    console.print(f"[bold]restform[/bold] v{__version__}")
    console.print(f"  Form: {form_path}")
    console.print(f"  Endpoint: {controller.config.http_method} {controller.config.endpoint_url}")

    try:
        controller.submit()
    finally:
        transport.close()

    record = controller.last_submission
    if out:
        out.write_text(view.to_html())
        console.print(f"  Rendered form written to {out}")

    if record is None:
        console.print("[red]Error:[/red] Submission did not complete")
        raise typer.Exit(1)

    if record.failure is None:
        console.print(f"\n[green]Success[/green] (status {record.response.status})")
        if record.data is not None:
            console.print_json(json.dumps(record.data))
        return

    table = Table(title=f"{record.failure.kind.capitalize()} errors")
    table.add_column("Field")
    table.add_column("Messages")
    for key, messages in record.failure.errors.items():
        table.add_row(key, "\n".join(messages))
    console.print(table)
    raise typer.Exit(1)


@app.command()
def validate(
    options_path: Annotated[
        Path,
        typer.Argument(help="Path to the YAML options file"),
    ],
) -> None:
    """Validate an options file against the options schema."""
    if not options_path.exists():
        console.print(f"[red]Error:[/red] Options file not found: {options_path}")
        raise typer.Exit(1)

    try:
        load_options(options_path)
    except ConfigurationError as e:
        console.print(f"[red]Invalid:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]Valid:[/green] {options_path}")


if __name__ == "__main__":
    app()
