"""Click CLI with commands: clean, explain."""

from __future__ import annotations

import json

import click

from cleanurls.cleaner import clean_url, explain_url
from cleanurls.config import build_rules, load_config
from cleanurls.extract import extract_url
from cleanurls.logging import setup_logging


@click.group()
@click.option("--config", "config_path", default="cleanurls.yaml", help="Path to config YAML file.")
@click.pass_context
def cli(ctx: click.Context, config_path: str) -> None:
    """cleanurls: strip tracking parameters from links."""
    ctx.ensure_object(dict)
    cfg = load_config(config_path)
    ctx.obj["config"] = cfg
    ctx.obj["rules"] = build_rules(cfg)
    ctx.obj["log"] = setup_logging(cfg.settings.log_dir, "cleanurls", cfg.settings.log_level)


def _summary(removed: int) -> str:
    if removed == 0:
        return "URL is already clean!"
    plural = "parameter" if removed == 1 else "parameters"
    return f"Removed {removed} tracking {plural}"


@cli.command()
@click.argument("texts", nargs=-1)
@click.option("--json", "as_json", is_flag=True, help="Print one JSON object per input.")
@click.option("--quiet", "-q", is_flag=True, help="Do not print status lines to stderr.")
@click.pass_context
def clean(ctx: click.Context, texts: tuple[str, ...], as_json: bool, quiet: bool) -> None:
    """Clean URLs given as arguments, or one per line on stdin."""
    rules = ctx.obj["rules"]
    log = ctx.obj["log"]

    if not texts:
        stdin = click.get_text_stream("stdin")
        texts = tuple(line for line in stdin.read().splitlines() if line.strip())

    missing = 0
    for text in texts:
        url = extract_url(text)
        if url is None:
            missing += 1
            log.warning("cli.no_url", text=text[:200])
            if as_json:
                click.echo(json.dumps({"input": text, "url": None, "removed": 0}))
            elif not quiet:
                click.echo("No valid URL found in input", err=True)
            continue

        result = clean_url(url, rules, log)
        log.info("cli.cleaned", url=result.url, removed=result.removed)
        if as_json:
            click.echo(json.dumps({"input": text, "url": result.url, "removed": result.removed}))
        else:
            click.echo(result.url)
            if not quiet:
                click.echo(_summary(result.removed), err=True)

    if missing:
        raise SystemExit(1)


@cli.command()
@click.argument("text")
@click.pass_context
def explain(ctx: click.Context, text: str) -> None:
    """Show which handler a URL goes through and how each parameter is classified."""
    explanation = explain_url(text, ctx.obj["rules"])
    if not explanation.valid:
        click.echo("Not a valid http(s) URL", err=True)
        raise SystemExit(1)

    if explanation.platform is not None:
        click.echo(f"Site handler: {explanation.platform}")
    else:
        click.echo("Generic cleaning")
        click.echo("\n=== Parameters ===")
        for param, decision in explanation.decisions:
            action = "remove" if decision.remove else "keep"
            click.echo(f"  {param.name}  {action}  ({decision.rule})")
        if not explanation.decisions:
            click.echo("  No query parameters.")

    click.echo("\n=== Result ===")
    click.echo(f"  {explanation.result.url}")
    click.echo(f"  {_summary(explanation.result.removed)}")
