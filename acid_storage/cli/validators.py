"""Input validation for CLI arguments."""
import re
import sys


def validate_project_name(name: str) -> None:
    """
    Validate a project name or store key.

    Names are hashed into keys, so any text is accepted except empty
    strings and whitespace.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not name:
        print("Error: Project name cannot be empty", file=sys.stderr)
        sys.exit(2)

    if re.search(r'\s', name):
        print(f"Error: Invalid project name '{name}'", file=sys.stderr)
        print("\nProject names cannot contain whitespace.", file=sys.stderr)
        print("\nExamples of valid names:", file=sys.stderr)
        print("  ✓ deis/empty-testbed", file=sys.stderr)
        print("  ✓ acid-2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e730433", file=sys.stderr)
        sys.exit(2)


def validate_namespace(namespace: str) -> None:
    """
    Validate a namespace matches [a-z0-9-]+.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not re.match(r'^[a-z0-9-]+$', namespace or ""):
        print(f"Error: Invalid namespace '{namespace}'", file=sys.stderr)
        print("\nAllowed characters: lowercase letters, numbers, hyphens (-)", file=sys.stderr)
        sys.exit(2)
