import click
import logging
import yaml
from .app import AppContext
from .errors import FeaturepickError
from .version import get_version

LOG_FORMAT = "[%(levelname)s] %(message)s"

from dotenv import load_dotenv

load_dotenv()


def register_commands(cli):
    from .commands.run import run

    cli.add_command(run)

    from .commands.select import select, show

    cli.add_command(select)
    cli.add_command(show)

    from .commands.pick import pick

    cli.add_command(pick)


@click.group(invoke_without_command=True)
@click.version_option(version=get_version(), prog_name="featurepick")
@click.pass_context
@click.option(
    "--repo-path",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    default=".",
    help="Path to the git repository",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to the config file (default: .featurepick.yaml)",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
def cli(ctx: click.Context, repo_path: str, config_path: str, verbose: bool):
    """Cherry-pick the commits of several feature branches onto the current branch."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    app: AppContext = ctx.obj
    try:
        app.load(repo_path, config_path)
    except (FeaturepickError, FileNotFoundError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    if ctx.invoked_subcommand is None:
        from .commands.run import run

        ctx.invoke(run)


def main():
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
    )
    register_commands(cli)
    cli(obj=AppContext())


if __name__ == "__main__":
    main()
