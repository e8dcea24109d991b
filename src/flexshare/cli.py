"""CLI main entry point."""

import json
import logging
from pathlib import Path

import click

from .compiler import Compiler
from .config import Config
from .consts import CONFIG_FILE_DEFAULT
from .defaults import resolve_defaults
from .errors import FlexShareException, TemplateException
from .i18n import initialize
from .log import setup as setup_log
from .models import load_template
from .resolver import upgrade_template
from .store import get_template, get_template_store

logger = logging.getLogger(__name__)


def _read_json(path: str, what: str):
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise click.ClickException(f"Cannot read {what} file {path}: {e}")
    except ValueError as e:
        raise click.ClickException(f"{what.capitalize()} file {path} is not valid JSON: {e}")


def _load_template_arg(cfg: Config, template_file: str | None, template_id: str | None):
    if bool(template_file) == bool(template_id):
        raise click.UsageError("Pass exactly one of --template-file or --template-id")
    if template_id:
        return get_template(get_template_store(cfg), template_id)
    return load_template(_read_json(template_file, "template"))


def _echo_json(payload, output: str | None, indent: int) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=indent or None)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        logger.info("Wrote %s", output)
    else:
        click.echo(text)


@click.group()
@click.option(
    "--config", "-c", default=CONFIG_FILE_DEFAULT, help="Configuration file path"
)
@click.pass_context
def cli(ctx, config: str):
    """Flexshare - compile form data into Flex Message JSON."""
    ctx.ensure_object(dict)
    try:
        cfg = Config.load_or_default(config)
    except FlexShareException as e:
        raise click.ClickException(str(e))

    setup_log(cfg.log_file)
    initialize(ui_language=cfg.language)
    ctx.obj["config"] = cfg


@cli.command(name="compile")
@click.argument("data_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--template-file", "-f", default=None,
    type=click.Path(exists=True, dir_okay=False), help="Template record JSON file",
)
@click.option("--template-id", "-t", default=None, help="Use a stored template by id")
@click.option("--output", "-o", default=None, help="Write the message to this file")
@click.option("--indent", default=2, type=int, show_default=True)
@click.pass_context
def compile_command(ctx, data_file, template_file, template_id, output, indent):
    """Compile DATA_FILE against a template and print the message.

    Exits with status 1 when the compile reports any error.
    """
    cfg = ctx.obj["config"]
    try:
        template = _load_template_arg(cfg, template_file, template_id)
        data = _read_json(data_file, "data")
        result = Compiler.from_config(cfg).compile(template, data)
    except FlexShareException as e:
        logger.error("Compile failed: %s", e)
        raise click.ClickException(str(e))

    for error in result.errors:
        click.echo(f"{error.path}: {error.message}", err=True)

    if result.message is not None:
        _echo_json(result.message, output, indent)

    if result.errors:
        ctx.exit(1)


@cli.command(name="defaults")
@click.option(
    "--template-file", "-f", default=None,
    type=click.Path(exists=True, dir_okay=False), help="Template record JSON file",
)
@click.option("--template-id", "-t", default=None, help="Use a stored template by id")
@click.option("--indent", default=2, type=int, show_default=True)
@click.pass_context
def defaults_command(ctx, template_file, template_id, indent):
    """Print the initial form data for a template's schema."""
    cfg = ctx.obj["config"]
    try:
        template = upgrade_template(_load_template_arg(cfg, template_file, template_id))
    except TemplateException as e:
        raise click.ClickException(str(e))
    _echo_json(resolve_defaults(template.form_schema), None, indent)


@cli.command(name="templates")
@click.option("--export", "export_dir", default=None, help="Write each template as <id>.json here")
@click.pass_context
def templates_command(ctx, export_dir):
    """List stored templates, or export them as JSON records."""
    cfg = ctx.obj["config"]
    try:
        templates = get_template_store(cfg).list_all()
    except FlexShareException as e:
        raise click.ClickException(str(e))

    if export_dir:
        directory = Path(export_dir)
        directory.mkdir(parents=True, exist_ok=True)
        for template in templates:
            path = directory / f"{template.id}.json"
            path.write_text(
                template.model_dump_json(by_alias=True, exclude_none=True, indent=2),
                encoding="utf-8",
            )
            click.echo(str(path))
        return

    click.echo("id\tstatus\tversion\tmode\tname")
    for template in templates:
        click.echo(
            f"{template.id}\t{template.status.value}\t{template.version}\t"
            f"{template.render_mode.value}\t{template.name}"
        )


@cli.command(name="serve")
@click.option("--host", "-h", default=None, help="Override host from config")
@click.option("--port", "-p", default=None, type=int, help="Override port from config")
@click.pass_context
def serve(ctx, host, port):
    """Start the compile API server."""
    import uvicorn

    from .api import create_app

    cfg = ctx.obj["config"]
    host = host or cfg.web.host
    port = port or cfg.web.port

    logger.info("Starting API server on %s:%s", host, port)
    uvicorn.run(create_app(cfg), host=host, port=port)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
