"""CLI entrypoint for acid-storage."""
import sys
import argparse
import logging
from dataclasses import asdict
from pathlib import Path

import yaml

from .validators import validate_namespace, validate_project_name
from ..projects.domains.errors import ProjectNotFoundError, StorageError
from ..projects.domains.identifiers import project_id, short_sha
from ..projects.workflows.project_operations import new

VERSION = "0.1.0"

MASK = "********"

logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def _mask(value: str) -> str:
    return MASK if value else ""


def _resolve_namespace(args) -> str:
    """Namespace from --namespace, GCP_PROJECT or the config file."""
    namespace = args.namespace
    if not namespace:
        from ..projects.domains.gcp_client import GCPSecretStore
        namespace = GCPSecretStore().get_default_namespace()

    if not namespace:
        print("Error: No namespace given", file=sys.stderr)
        print("\nPass --namespace, set GCP_PROJECT, or set gcp.project_id in the config file.", file=sys.stderr)
        sys.exit(2)

    validate_namespace(namespace)
    return namespace


def cmd_version(args):
    """Show version information."""
    print(f"acid-storage {VERSION}")


def cmd_config_set_path(args):
    """Set config file path preference."""
    from ..projects.domains.preferences import set_preference

    config_path = Path(args.path).resolve()

    if not config_path.exists():
        print(f"Error: Config file does not exist: {config_path}", file=sys.stderr)
        sys.exit(1)

    if not config_path.is_file():
        print(f"Error: Path is not a file: {config_path}", file=sys.stderr)
        sys.exit(1)

    set_preference("config_path", str(config_path))
    print(f"Config path set to: {config_path}")


def cmd_config_show(args):
    """Show current config file path and where it came from."""
    from ..projects.domains.config_loader import default_config_path
    from ..projects.domains.preferences import get_preference

    config_path_pref = get_preference("config_path")

    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            print(f"Config path: {config_path}")
        else:
            print(f"Config path (from preference, but file not found): {config_path}")
        print("Source: preference")
        return

    default_config = default_config_path()
    print(f"Config path: {default_config}")
    if default_config.exists():
        print("Source: default")
    else:
        print("Source: default (file not found)")


def cmd_config_clear(args):
    """Clear config path preference."""
    from ..projects.domains.config_loader import default_config_path
    from ..projects.domains.preferences import clear_preference

    clear_preference("config_path")
    print(f"Config path preference cleared. Will use default: {default_config_path()}")


def cmd_projects_key(args):
    """Print the store key a project name maps to."""
    validate_project_name(args.name)
    print(project_id(args.name))


def cmd_projects_short_sha(args):
    """Print the truncated digest of an arbitrary string."""
    print(short_sha(args.input))


def cmd_projects_get(args):
    """Load a project's configuration and print it as YAML."""
    validate_project_name(args.name)
    namespace = _resolve_namespace(args)

    try:
        project = new().get(args.name, namespace, timeout=args.timeout)
    except ProjectNotFoundError as e:
        print(f"Error: Project '{args.name}' not found ({e.key} in namespace {e.namespace})", file=sys.stderr)
        sys.exit(1)
    except StorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.quiet:
        print(project.name)
        return

    output = asdict(project)
    if not args.reveal:
        output["shared_secret"] = _mask(project.shared_secret)
        output["github_token"] = _mask(project.github_token)
        output["repo"]["ssh_key"] = _mask(project.repo.ssh_key)
        output["secrets"] = {name: _mask(value) for name, value in project.secrets.items()}

    print(yaml.safe_dump(output, default_flow_style=False, sort_keys=False), end="")


def build_parser():
    """Build the argument parser along with its nested command parsers."""
    parser = argparse.ArgumentParser(
        prog="acid-storage",
        description="Look up acid project configuration stored in GCP Secret Manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (authentication, network, project not found, bad record)
  2 - Usage error (invalid arguments, invalid project name or namespace)

Environment variables:
  GCP_PROJECT - Default namespace (overrides config file)

Configuration:
  Default location: ~/.config/acid-storage/config.yml
  Custom path: Set with 'acid-storage config set-path <path>'
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of acid-storage"
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Manage acid-storage configuration"
    )
    config_subparsers = config_parser.add_subparsers(dest="config_command")

    config_set_path_parser = config_subparsers.add_parser(
        "set-path",
        help="Set config file path",
        description="Store the absolute path to your config file in ~/.config/acid-storage/preferences.json"
    )
    config_set_path_parser.add_argument("path", help="Path to config file")

    config_subparsers.add_parser(
        "show",
        help="Show current config path",
        description="Display the current configuration file path and whether it comes from a preference or the default"
    )
    config_subparsers.add_parser(
        "clear",
        help="Clear config path preference",
        description="Remove the config path preference and fall back to ~/.config/acid-storage/config.yml"
    )

    # projects command
    projects_parser = subparsers.add_parser(
        "projects",
        help="Project configuration lookups",
        description="Read project configuration records"
    )
    projects_subparsers = projects_parser.add_subparsers(dest="projects_command")

    get_parser = projects_subparsers.add_parser(
        "get",
        help="Show a project's configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Load a project's configuration record and print it as YAML.

Secret values (shared secret, GitHub token, SSH key, build secrets) are
masked unless --reveal is given.

Exit codes:
  0 - Project found and printed
  1 - Project not found, store unreachable, or record malformed
  2 - Invalid project name or namespace
        """
    )
    get_parser.add_argument("name", help="Project name, or a derived acid-<digest> key")
    get_parser.add_argument(
        "-n", "--namespace",
        help="Namespace holding the record (defaults to GCP_PROJECT or the config file)"
    )
    get_parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds to wait for the store"
    )
    get_parser.add_argument(
        "--reveal",
        action="store_true",
        help="Print secret values instead of masking them"
    )
    get_parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Print only the record name"
    )

    key_parser = projects_subparsers.add_parser(
        "key",
        help="Show the store key for a project name",
        description="Print the acid-<digest> key a project name is stored under"
    )
    key_parser.add_argument("name", help="Project name")

    short_sha_parser = projects_subparsers.add_parser(
        "short-sha",
        help="Show the truncated SHA-256 of a string",
        description="Print the first 54 hex characters of the SHA-256 digest of INPUT"
    )
    short_sha_parser.add_argument("input", help="String to hash")

    return parser, config_parser, projects_parser


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (authentication, network, project not found, etc.)
        2 - Usage errors (invalid arguments, invalid project name, etc.)
    """
    parser, config_parser, projects_parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.command:
        parser.print_help()
        sys.exit(2)

    try:
        if args.command == "version":
            cmd_version(args)
        elif args.command == "config":
            if args.config_command == "set-path":
                cmd_config_set_path(args)
            elif args.config_command == "show":
                cmd_config_show(args)
            elif args.config_command == "clear":
                cmd_config_clear(args)
            else:
                config_parser.print_help()
                sys.exit(2)
        elif args.command == "projects":
            if args.projects_command == "get":
                cmd_projects_get(args)
            elif args.projects_command == "key":
                cmd_projects_key(args)
            elif args.projects_command == "short-sha":
                cmd_projects_short_sha(args)
            else:
                projects_parser.print_help()
                sys.exit(2)
        else:
            parser.print_help()
            sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
