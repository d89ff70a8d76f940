"""Main entry point when executing grindcli as a package.

This allows running the package using python -m grindcli.
"""

from grindcli.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point() 