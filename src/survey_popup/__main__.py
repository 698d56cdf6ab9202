"""
Entry point for running survey_popup as a module.

Usage:
    $ python -m survey_popup run --tab-url https://example.com
    $ python -m survey_popup web --port 5000
    $ python -m survey_popup version
"""
from .main import run_cli

if __name__ == "__main__":
    run_cli()
