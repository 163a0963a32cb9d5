#!/usr/bin/python
import sys

import click

from jdkfetch import cli
from jdkfetch import log
from jdkfetch.error import JdkFetchError


def _post_mortem():
    if cli.debug_enabled:
        import pdb
        pdb.post_mortem(sys.exc_info()[2])


def main():
    try:
        cli.cli(obj=dict(), standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except (KeyboardInterrupt, click.Abort):
        log.warning("Interrupted by user")
        _post_mortem()
        sys.exit(1)
    except JdkFetchError as e:
        # Expected failures, such as a missing release or a network error
        log.error(log.format_exception_msg(e))
        _post_mortem()
        sys.exit(1)
    except Exception as e:
        log.exception(e, error=True)
        _post_mortem()
        sys.exit(1)


if __name__ == "__main__":
    main()
