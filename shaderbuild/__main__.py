"""The shaderbuild CLI.

Invoke using e.g. ``python -m shaderbuild build`` or ``python -m shaderbuild watch``.
"""

import sys
import logging
import argparse

import shaderbuild
from shaderbuild.utils import logger
from shaderbuild.utils.config import BuildConfig


class ConsoleFormatter(logging.Formatter):
    """Show info messages as-is, and prefix anything else with its level."""

    def format(self, record):
        message = super().format(record)
        if record.levelno == logging.INFO:
            return message
        return f"{record.levelname}: {message}"


def setup_logging(verbose=False):
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ConsoleFormatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return handler


def get_parser():
    parser = argparse.ArgumentParser(
        prog="shaderbuild",
        description="Compile GLSL shaders to SPIR-V, once or on every change.",
    )
    parser.add_argument(
        "command",
        action="store",
        help="The command to run: 'help', 'version', 'build' or 'watch'",
    )
    parser.add_argument("--compiler", help="Path to glslangValidator")
    parser.add_argument("--input", dest="input_root", help="The shader source dir")
    parser.add_argument("--output", dest="output_root", help="The artifact dir")
    parser.add_argument(
        "--include-root", dest="include_root", help="Root search path for includes"
    )
    parser.add_argument(
        "--stop-on-failure",
        action="store_true",
        default=None,
        help="Stop building at the first shader that fails",
    )
    parser.add_argument("--verbose", action="store_true", help="Show debug output")
    return parser


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    # Defaults and aliases
    if not argv:
        argv = ["help"]
    if argv == ["--version"]:
        argv = ["version"]

    parser = get_parser()
    args = parser.parse_args(argv)
    command = args.command.lower()

    if command == "help":
        parser.print_help()
        return 0
    elif command == "version":
        print("shaderbuild v" + shaderbuild.__version__)
        return 0
    elif command not in ("build", "watch"):
        print(f"Invalid command '{command}'")
        return 2

    handler = setup_logging(args.verbose)
    try:
        config = BuildConfig.from_env(
            compiler=args.compiler,
            input_root=args.input_root,
            output_root=args.output_root,
            include_root=args.include_root,
            stop_on_failure=args.stop_on_failure,
        )
        builder = shaderbuild.ShaderBuilder(config)
        if command == "build":
            ok = builder.build_all()
        else:
            ok = shaderbuild.ShaderWatcher(builder).run()
    except (ValueError, OSError) as err:
        logger.error(str(err))
        return 1
    finally:
        logger.removeHandler(handler)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
