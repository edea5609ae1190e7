import logging

import click

from rollout import config
from rollout.errors import RolloutError
from rollout.logging_config import setup_logging
from rollout.manager import Manager
from rollout.models import Feature
from rollout.store import RedisStore, connect

logger = logging.getLogger(__name__)


def _manager(ctx: click.Context) -> Manager:
    try:
        client = connect(ctx.obj["host"], socket_timeout=config.REDIS_SOCKET_TIMEOUT)
    except RolloutError as e:
        raise click.ClickException(str(e)) from e
    return Manager(RedisStore(client), ctx.obj["prefix"])


def _run(action, *args) -> None:
    try:
        action(*args)
    except RolloutError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option(
    "--host",
    default=config.REDIS_HOST,
    show_default=True,
    help="Redis host connection string (comma separated)",
)
@click.option("--prefix", default=config.KEY_PREFIX, show_default=True, help="Key prefix for feature flags")
@click.pass_context
def cli(ctx: click.Context, host: str, prefix: str) -> None:
    """Manage feature flags stored in Redis."""
    setup_logging()
    ctx.ensure_object(dict)
    ctx.obj["host"] = host
    ctx.obj["prefix"] = prefix


@cli.command("list")
@click.pass_context
def list_flags(ctx: click.Context) -> None:
    """List all feature flags"""
    manager = _manager(ctx)
    try:
        features = manager.list_features()
    except RolloutError as e:
        raise click.ClickException(str(e)) from e

    rows = [("flag", "percentage", "active_teams"), ("----", "----------", "------------")]
    for feature in features:
        rows.append((feature.name, str(feature.percentage), ",".join(str(t) for t in sorted(feature.team_ids))))

    widths = [max(len(row[i]) for row in rows) for i in range(2)]
    for name, percentage, teams in rows:
        click.echo(f" {name.ljust(widths[0])}  {percentage.ljust(widths[1])}  {teams}".rstrip())


@cli.command()
@click.argument("name")
@click.argument("percentage", type=int)
@click.pass_context
def rollout(ctx: click.Context, name: str, percentage: int) -> None:
    """Rollout a feature flag to the given percentage of teams"""
    _run(_manager(ctx).activate_percentage, Feature(name), percentage)
    logger.info("rolled out %s to %d%%", name, percentage)


@cli.command()
@click.argument("name")
@click.pass_context
def activate(ctx: click.Context, name: str) -> None:
    """Activate a feature flag for all teams"""
    _run(_manager(ctx).activate, Feature(name))
    logger.info("activated %s", name)


@cli.command()
@click.argument("name")
@click.pass_context
def deactivate(ctx: click.Context, name: str) -> None:
    """Deactivate a feature flag for all teams"""
    _run(_manager(ctx).deactivate, Feature(name))
    logger.info("deactivated %s", name)


@cli.command("activate-team")
@click.argument("name")
@click.argument("team_id", type=int)
@click.pass_context
def activate_team(ctx: click.Context, name: str, team_id: int) -> None:
    """Activate a feature flag for a specific team"""
    _run(_manager(ctx).activate_team, team_id, Feature(name))
    logger.info("activated %s for team %d", name, team_id)


@cli.command("deactivate-team")
@click.argument("name")
@click.argument("team_id", type=int)
@click.pass_context
def deactivate_team(ctx: click.Context, name: str, team_id: int) -> None:
    """Deactivate a feature flag for a specific team"""
    _run(_manager(ctx).deactivate_team, team_id, Feature(name))
    logger.info("deactivated %s for team %d", name, team_id)


@cli.command()
@click.argument("name")
@click.pass_context
def delete(ctx: click.Context, name: str) -> None:
    """Delete a feature flag from the database"""
    manager = _manager(ctx)
    try:
        count = manager.delete(Feature(name))
    except RolloutError as e:
        raise click.ClickException(str(e)) from e
    if count == 0:
        click.echo("Feature flag was not found")
        return
    click.echo(f"Deleted feature flag {name}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
