import json
import typer
from typing import Any, Dict, List, Optional
from vmodels.config.loader import load_stack
from vmodels.resolve.chain import resolve_chain
from vmodels.resolve.resolver import resolve_model
from vmodels.util.errors import VirtualModelError
from vmodels.util.types import ErrorInfo

app = typer.Typer(add_completion=False, help="vmodels CLI - resolve virtual model definitions")

def _fail(error: ErrorInfo) -> None:
    typer.echo(f"[error] {error.code}: {error.message}", err=True)
    raise typer.Exit(code=1)

def parse_assignments(assignments: List[str]) -> Dict[str, Any]:
    """Parse ``key=value`` pairs; values are JSON when they parse, raw strings otherwise."""
    values: Dict[str, Any] = {}
    for item in assignments:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got {item!r}", param_hint="--set")
        try:
            values[key] = json.loads(raw)
        except json.JSONDecodeError:
            values[key] = raw
    return values

def _load(cwd: str, catalog: Optional[List[str]]):
    res = load_stack(cwd, extra_catalog_dirs=catalog)
    if not res.ok:
        _fail(res.error)
    return res.value

@app.command()
def resolve(model: str = typer.Argument(..., help="Virtual model key, user/repo"),
            cwd: str = typer.Option(".", "--cwd", help="Directory to start .vmodels discovery from"),
            catalog: Optional[List[str]] = typer.Option(None, "--catalog", help="Extra catalog directory (repeatable)"),
            set_: Optional[List[str]] = typer.Option(None, "--set", help="Custom field value, key=value (repeatable)"),
            indent: int = typer.Option(2, "--indent")):
    """Resolve MODEL and print the resolved model as JSON."""
    settings, cat = _load(cwd, catalog)
    res = resolve_model(model, cat, user_values=parse_assignments(set_ or []), settings=settings)
    if not res.ok:
        _fail(res.error)
    for warning in res.warnings:
        typer.echo(f"[warn] {warning.code}: {warning.message}", err=True)
    typer.echo(res.value.to_json(indent=indent or None))

@app.command()
def chain(model: str = typer.Argument(..., help="Virtual model key, user/repo"),
          cwd: str = typer.Option(".", "--cwd"),
          catalog: Optional[List[str]] = typer.Option(None, "--catalog")):
    """Print the chain of MODEL, most specific first, then its concrete bases."""
    settings, cat = _load(cwd, catalog)
    try:
        ch = resolve_chain(model, cat, max_depth=settings.max_chain_depth)
    except VirtualModelError as e:
        _fail(e.to_error_info())
    typer.echo(" -> ".join(ch.keys()))
    for base in ch.concrete_bases:
        typer.echo(f"  {base.key}")

@app.command()
def check(cwd: str = typer.Option(".", "--cwd"),
          catalog: Optional[List[str]] = typer.Option(None, "--catalog")):
    """Resolve every model in the catalog with default field values and report failures."""
    settings, cat = _load(cwd, catalog)
    failures = 0
    for key in cat.keys():
        res = resolve_model(key, cat, settings=settings)
        if res.ok:
            typer.echo(f"ok    {key}")
        else:
            failures += 1
            typer.echo(f"FAIL  {key}  {res.error.code}: {res.error.message}")
    typer.echo(f"{len(cat) - failures}/{len(cat)} models resolved")
    if failures:
        raise typer.Exit(code=1)

if __name__ == "__main__":
    app()
