import click
import os
import sys

from jdkfetch import cache
from jdkfetch import config
from jdkfetch import filesystem as fs
from jdkfetch import log
from jdkfetch.version import __version__
from jdkfetch.error import InvalidArgumentError, raise_error_if
from jdkfetch.fetcher import JdkFetcher
from jdkfetch.platforms import Platform

debug_enabled = False


def _fetcher(ctx):
    if "fetcher" not in ctx.obj:
        ctx.obj["fetcher"] = JdkFetcher(
            cache=cache.JdkCache(ctx.obj.get("cachedir")),
            platform=ctx.obj.get("platform"))
    return ctx.obj["fetcher"]


@click.group()
@click.version_option(__version__)
@click.option("-v", "--verbose", count=True, help="Verbose output (repeat to raise verbosity).")
@click.option("-c", "--config", "config_file", multiple=True, type=str,
              help="Load a configuration file or set a configuration key.")
@click.option("--cachedir", type=click.Path(file_okay=False),
              help="Directory where JDKs are installed.")
@click.option("-p", "--platform", type=str,
              help="Operating system to fetch for, e.g. 'linux' or 'Windows 11' [host].")
@click.option("-d", "--debugger", is_flag=True, hidden=True,
              help="Attach debugger on exception.")
@click.pass_context
def cli(ctx, verbose, config_file, cachedir, platform, debugger):
    """
    Download and cache Eclipse Temurin JDKs.

    JDKs are looked up in the Adoptium release listings on GitHub,
    downloaded for the requested operating system and unpacked into
    a per-version directory in the cache:

      $ jdkfetch fetch 17

    Configuration keys can be set with -c, e.g. -c jdkfetch.cachedir=/opt/jdks.
    """

    global debug_enabled
    debug_enabled = debugger

    if verbose >= 3:
        log.set_level(log.EXCEPTION)
    elif verbose >= 2:
        log.set_level(log.DEBUG)
    elif verbose >= 1:
        log.set_level(log.VERBOSE)

    for item in config_file:
        log.verbose("Config: {0}", item)
        config.load_or_set(item)

    ctx.ensure_object(dict)
    if cachedir:
        ctx.obj["cachedir"] = cachedir
    if platform:
        ctx.obj["platform"] = Platform.normalize(platform)

    if config.getboolean("jdkfetch", "logfile", True):
        log.start_file_log()

    log.verbose("jdkfetch version: {}", __version__)
    log.verbose("jdkfetch command: {}", " ".join([fs.path.basename(sys.argv[0])] + sys.argv[1:]))
    log.verbose("jdkfetch workdir: {}", os.getcwd())


@cli.command()
@click.argument("version", type=str)
@click.pass_context
def fetch(ctx, version):
    """
    Install a JDK and print its path.

    Nothing is downloaded if VERSION is already installed.
    """
    click.echo(_fetcher(ctx).get_jdk_path(version))


@cli.command()
@click.argument("version", type=str)
@click.pass_context
def resolve(ctx, version):
    """
    Print the download URL of a JDK.
    """
    click.echo(_fetcher(ctx).resolve(version).download_url)


@cli.command()
@click.argument("version", type=str)
@click.pass_context
def path(ctx, version):
    """
    Print the path of an installed JDK.

    Exits with status 1 if VERSION is not installed.
    """
    pathname = _fetcher(ctx).cache.lookup(version)
    if pathname is None:
        log.error("JDK {} is not installed", version)
        sys.exit(1)
    click.echo(pathname)


@cli.command(name="java-home")
@click.argument("version", type=str)
@click.pass_context
def java_home(ctx, version):
    """
    Install a JDK and print its JAVA_HOME.
    """
    click.echo(cache.java_home(_fetcher(ctx).get_jdk_path(version)))


@cli.command(name="config")
@click.option("-l", "--list", "list_", is_flag=True,
              help="List all configuration keys and values.")
@click.option("-d", "--delete", is_flag=True,
              help="Delete a key from the user configuration.")
@click.argument("key", type=str, nargs=1, required=False)
@click.argument("value", type=str, nargs=1, required=False)
def _config(list_, delete, key, value):
    """
    Get, set or delete configuration keys.

    KEY is given as section.option, e.g. jdkfetch.cachedir. New values
    are written to the user configuration file:

      $ jdkfetch config jdkfetch.cachedir /opt/jdks

      $ jdkfetch config -l

      $ jdkfetch config -d jdkfetch.cachedir

    """
    if list_:
        raise_error_if(key is not None, "Key and --list can't be combined", type=InvalidArgumentError)
        for section, option, val in config.items():
            click.echo(f"{section}.{option} = {val}")
        return

    raise_error_if(key is None, "A configuration key is required", type=InvalidArgumentError)
    section, option = config.split_key(key)

    if delete:
        raise_error_if(value is not None, "Key and value can't be deleted at once", type=InvalidArgumentError)
        if not config.delete(section, option, layer=config.USER):
            sys.exit(1)
        config.save(config.USER)
        return

    if value is None:
        value = config.get(section, option, expand=False)
        if value is None:
            sys.exit(1)
        click.echo(value)
        return

    config.set(section, option, value, layer=config.USER)
    config.save(config.USER)
