import json
from pathlib import Path
from typing import Any

import click

from logsnag.client import LogSnagClient
from logsnag.config import load_config
from logsnag.errors import BaseLogSnagError
from logsnag.logging import setup_logging
from logsnag.primitives import InsightValue
from logsnag.primitives import ParserKind


def _parse_key_value_pairs(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str] | None:
    if not values:
        return None
    pairs: dict[str, str] = {}
    for item in values:
        key, separator, value = item.partition("=")
        if not separator:
            raise click.BadParameter(f"Expected KEY=VALUE, got {item!r}", ctx=ctx, param=param)
        pairs[key] = value
    return pairs


def _parse_insight_value(raw: str) -> InsightValue:
    """Interpret a command line value as an int, then a float, falling back to the raw string."""
    for convert in (int, float):
        try:
            return convert(raw)
        except ValueError:
            continue
    return raw


def _echo_response(response: dict[str, Any]) -> None:
    click.echo(json.dumps(response, indent=2, sort_keys=True))


def _get_client(ctx: click.Context) -> LogSnagClient:
    config_path: Path | None = ctx.obj["config_path"]
    try:
        return LogSnagClient.from_config(load_config(config_path=config_path))
    except BaseLogSnagError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML config file (default: $LOGSNAG_CONFIG)",
)
@click.option(
    "--log-level",
    type=click.Choice(["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Log level for messages written to stderr",
)
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, log_level: str) -> None:
    """Send events and insights to LogSnag.

    The token and project are read from LOGSNAG_TOKEN and LOGSNAG_PROJECT or from
    the config file.
    """
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@main.command()
@click.argument("channel")
@click.argument("event")
@click.option("--user-id", default=None, help="User to link the event to")
@click.option("--description", default=None, help="Longer description of the event")
@click.option("--icon", default=None, help="Icon (usually an emoji) shown with the event")
@click.option("--notify/--no-notify", default=None, help="Send a push notification")
@click.option("--tag", "tags", multiple=True, callback=_parse_key_value_pairs, help="Tag as KEY=VALUE (repeatable)")
@click.option(
    "--parser",
    type=click.Choice([kind.value for kind in ParserKind]),
    default=None,
    help="How the description is rendered",
)
@click.option("--timestamp", type=int, default=None, help="UNIX timestamp for historical events")
@click.pass_context
def log(
    ctx: click.Context,
    channel: str,
    event: str,
    user_id: str | None,
    description: str | None,
    icon: str | None,
    notify: bool | None,
    tags: dict[str, str] | None,
    parser: str | None,
    timestamp: int | None,
) -> None:
    """Log EVENT to CHANNEL."""
    client = _get_client(ctx)
    try:
        response = client.log(
            channel,
            event,
            user_id=user_id,
            description=description,
            icon=icon,
            notify=notify,
            tags=tags,
            parser=parser,
            timestamp=timestamp,
        )
    except BaseLogSnagError as e:
        raise click.ClickException(str(e)) from e
    _echo_response(response)


@main.command()
@click.argument("user_id")
@click.option(
    "--property",
    "properties",
    multiple=True,
    required=True,
    callback=_parse_key_value_pairs,
    help="User property as KEY=VALUE (repeatable)",
)
@click.pass_context
def identify(ctx: click.Context, user_id: str, properties: dict[str, str]) -> None:
    """Attach properties to USER_ID."""
    client = _get_client(ctx)
    try:
        response = client.identify(user_id, properties)
    except BaseLogSnagError as e:
        raise click.ClickException(str(e)) from e
    _echo_response(response)


@main.command()
@click.argument("title")
@click.argument("value")
@click.option("--icon", default=None, help="Icon shown with the insight")
@click.pass_context
def insight(ctx: click.Context, title: str, value: str, icon: str | None) -> None:
    """Set the insight TITLE to VALUE."""
    client = _get_client(ctx)
    try:
        response = client.insight(title, _parse_insight_value(value), icon=icon)
    except BaseLogSnagError as e:
        raise click.ClickException(str(e)) from e
    _echo_response(response)


@main.command()
@click.argument("title")
@click.option("--inc", type=int, default=None, help="Amount to add to the insight (negative to decrease)")
@click.option("--icon", default=None, help="Icon shown with the insight")
@click.pass_context
def mutate(ctx: click.Context, title: str, inc: int | None, icon: str | None) -> None:
    """Change the insight TITLE relative to its current value."""
    client = _get_client(ctx)
    try:
        response = client.insight_mutate(title, inc=inc, icon=icon)
    except BaseLogSnagError as e:
        raise click.ClickException(str(e)) from e
    _echo_response(response)


if __name__ == "__main__":
    main()
