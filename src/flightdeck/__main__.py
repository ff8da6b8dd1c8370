"""
=============================================================================
FLIGHTDECK CLI ENTRY POINT
=============================================================================

Serve one CGI request with an application defined in some module.

=============================================================================
USAGE
=============================================================================

    # In a CGI wrapper script, with the gateway's environment:
    python -m flightdeck myapp:app

    # Point sessions somewhere writable
    python -m flightdeck myapp:app --session-dir /var/lib/myapp/sessions

    # Factory functions are called
    python -m flightdeck myapp:create_app

    # Inspect the route table without serving
    python -m flightdeck myapp:app --list-routes

A minimal wrapper for Apache or fcgiwrap:

    #!/bin/sh
    exec /usr/bin/python3 -m flightdeck myapp:app

=============================================================================
"""

import argparse
import importlib
import sys
from typing import Any

from . import __version__
from .app import Application
from .errors import ConfigError


def load_application(target: str) -> Application:
    """
    Import ``module:attr`` and return the Application it names.

    ``attr`` may be dotted (``pkg.web:site.app``). A callable that isn't
    an Application is treated as a factory and called without arguments.

    Raises:
        ValueError: ``target`` is not ``module:attr``.
        TypeError: the object is not (and does not produce) an Application.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Expected 'module:attribute', got {target!r}")

    obj: Any = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        obj = getattr(obj, attr)

    if not isinstance(obj, Application) and callable(obj):
        obj = obj()
    if not isinstance(obj, Application):
        raise TypeError(f"{target} is {type(obj).__name__}, not an Application")
    return obj


def main(argv=None) -> int:
    """
    Main CLI entry point.

    Returns the process exit status: 0 after a response was sent (even
    a 404 or 500), 2 when the application could not be loaded or
    configured.
    """
    parser = argparse.ArgumentParser(
        prog="python -m flightdeck",
        description="Serve one CGI request with a flightdeck application",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m flightdeck myapp:app                          # Serve the request
  python -m flightdeck myapp:app --session-dir ./var      # Custom session dir
  python -m flightdeck myapp:app --list-routes            # Show routes
        """
    )

    parser.add_argument(
        "app",
        help="Application to serve, as module:attribute",
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONFIG OVERRIDES
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--session-dir", "-s",
        default=None,
        help="Directory for session files (overrides FLIGHTDECK_SESSION_DIR)"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: from the application's config)"
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Access log format"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--list-routes",
        action="store_true",
        help="Print the route table and exit"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"flightdeck {__version__}"
    )

    args = parser.parse_args(argv)

    try:
        app = load_application(args.app)
    except (ImportError, AttributeError, ValueError, TypeError) as e:
        print(f"Error: cannot load {args.app}: {e}", file=sys.stderr)
        return 2

    overrides = {}
    if args.session_dir is not None:
        overrides["session_dir"] = args.session_dir
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.log_format is not None:
        overrides["log_format"] = args.log_format

    if overrides:
        try:
            app.configure(**overrides)
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

    if args.list_routes:
        app.router.print_routes()
        return 0

    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
