"""
Survey Popup Main Module - terminal shell and CLI.

This module wires a SurveySession to the terminal:
1. Probe: read the active tab URL (flag or running Chromium)
2. Load: fetch the survey questions
3. Survey: walk the questions with next / previous
4. Submit: post the answers, then reset or retry on request

CLI Usage:
    $ python -m survey_popup run --tab-url https://example.com/page
    $ python -m survey_popup run --cdp-endpoint http://localhost:9222 --verbose
    $ python -m survey_popup web --port 5000
"""
from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional

import click

from .api.client import SurveyApiClient
from .browser.probe import BrowserHostContext, HostContext, StaticHostContext
from .config import SurveyConfig
from .models.session_state import SessionStatus
from .session.machine import SurveySession
from .session.renderer import ChoiceControl, PopupView, render_view


__all__ = ["build_session", "run_terminal_session", "run_cli"]

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

PREVIOUS_COMMAND = ":prev"
QUIT_COMMAND = ":quit"


# =============================================================================
# SESSION FACTORY
# =============================================================================

def build_session(
    config: SurveyConfig,
    tab_url: Optional[str] = None,
    use_browser: bool = False,
) -> SurveySession:
    """
    Create a session with the right host probe.

    Args:
        config: Survey configuration.
        tab_url: Known active tab URL (used unless use_browser is set).
        use_browser: Read the active tab from the browser at config.cdp_endpoint.
    """
    host: HostContext
    if use_browser:
        host = BrowserHostContext(config.cdp_endpoint)
    else:
        host = StaticHostContext(tab_url)
    return SurveySession(SurveyApiClient(config), host, config)


# =============================================================================
# TERMINAL SHELL
# =============================================================================

def _draw(view: PopupView) -> None:
    """Print a view to the terminal."""
    click.echo()
    if view.question is not None:
        panel = view.question
        filled = int(panel.progress * 20)
        click.echo(click.style(f"[{'#' * filled}{'.' * (20 - filled)}] {panel.progress_text}", fg="blue"))
        click.echo(click.style(panel.prompt, bold=True))
        if isinstance(panel.control, ChoiceControl):
            for number, option in enumerate(panel.control.options, start=1):
                marker = "(*)" if option.selected else "( )"
                click.echo(f"  {number}. {marker} {option.value}")
        return

    color = "red" if view.status is SessionStatus.FAILED else "cyan"
    heading = f"{view.icon} {view.title}".strip()
    click.echo(click.style(heading, fg=color, bold=True))
    if view.message:
        click.echo(view.message)


def _read_answer(view: PopupView) -> str:
    """Prompt for an answer; choice numbers map onto option values."""
    panel = view.question
    assert panel is not None
    hint = f"{PREVIOUS_COMMAND} to go back, {QUIT_COMMAND} to close"

    if isinstance(panel.control, ChoiceControl):
        current = panel.control.selected_value or ""
        values = [option.value for option in panel.control.options]
        while True:
            raw = click.prompt(f"Choice number ({hint})", default=current, show_default=bool(current))
            raw = raw.strip()
            if raw.isdigit() and 1 <= int(raw) <= len(values):
                return values[int(raw) - 1]
            # Blank and shell commands are handled by the caller
            if raw in values or raw in ("", PREVIOUS_COMMAND, QUIT_COMMAND):
                return raw
            click.echo(click.style("Pick one of the listed options.", fg="yellow"))

    current = panel.control.value
    return click.prompt(f"Answer ({hint})", default=current, show_default=bool(current))


async def run_terminal_session(session: SurveySession) -> SessionStatus:
    """
    Drive a session interactively until the user closes it.

    Returns:
        The session status when the shell exits.
    """
    await session.initialize()

    while True:
        view = render_view(session.state, session.questions)
        _draw(view)
        status = view.status

        if status is SessionStatus.BLOCKED:
            return status

        if status is SessionStatus.WELCOME:
            if not view.is_enabled("start") or not click.confirm("Start survey?", default=True):
                return status
            session.start_survey()

        elif status is SessionStatus.IN_PROGRESS:
            answer = _read_answer(view)
            if answer.strip() == QUIT_COMMAND:
                return status
            if answer.strip() == PREVIOUS_COMMAND:
                if not session.go_previous():
                    click.echo(click.style("Already at the first question.", fg="yellow"))
                continue
            session.update_draft(answer)
            if not await session.go_next():
                click.echo(click.style("An answer is required.", fg="yellow"))

        elif status is SessionStatus.SUCCESS:
            if not click.confirm("Take survey again?", default=False):
                return status
            session.reset_survey()

        elif status is SessionStatus.FAILED:
            if not click.confirm("Try again?", default=True):
                return status
            await session.retry()

        else:
            # LOADING / SUBMITTING never outlive an awaited call here
            logger.warning(f"Unexpected resting state {status.value}")
            return status


# =============================================================================
# CLI INTERFACE
# =============================================================================

@click.group()
@click.version_option(version=__version__, prog_name="survey-popup")
def cli():
    """
    Survey Popup - short user surveys served by a remote survey service.
    """
    pass


@cli.command()
@click.option(
    "-u", "--tab-url",
    default=None,
    help="URL of the page the survey is opened on.",
)
@click.option(
    "--browser/--no-browser",
    default=False,
    help="Read the active tab from a running Chromium (default: no).",
)
@click.option(
    "--cdp-endpoint",
    default=None,
    help="Chromium DevTools endpoint (env: BROWSER_CDP_ENDPOINT).",
)
@click.option(
    "--questions-url",
    default=None,
    help="Question-list endpoint (env: SURVEY_QUESTIONS_URL).",
)
@click.option(
    "--answers-url",
    default=None,
    help="Answer-submission endpoint (env: SURVEY_ANSWERS_URL).",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    default=False,
    help="Show debug logging.",
)
def run(
    tab_url: Optional[str],
    browser: bool,
    cdp_endpoint: Optional[str],
    questions_url: Optional[str],
    answers_url: Optional[str],
    verbose: bool,
):
    """
    Open the survey in the terminal.

    Example:

        $ python -m survey_popup run -u https://example.com/article

        $ python -m survey_popup run --browser --cdp-endpoint http://localhost:9222
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = SurveyConfig.from_env(
        questions_url=questions_url,
        answers_url=answers_url,
        cdp_endpoint=cdp_endpoint,
    )
    session = build_session(config, tab_url=tab_url, use_browser=browser)

    try:
        status = asyncio.run(run_terminal_session(session))
    except (KeyboardInterrupt, click.Abort):
        click.echo()
        click.echo(click.style("Closed by user", fg="yellow"))
        sys.exit(130)
    except Exception as e:
        click.echo(click.style(f"[ERROR] Fatal error: {e}", fg="red"))
        logger.exception("Fatal error")
        sys.exit(1)

    sys.exit(1 if status is SessionStatus.FAILED else 0)


@cli.command()
@click.option(
    "-p", "--port",
    type=int,
    default=5000,
    help="Port to run on (default: 5000).",
)
@click.option(
    "-u", "--tab-url",
    default=None,
    help="URL of the page the survey is opened on.",
)
@click.option(
    "--browser/--no-browser",
    default=False,
    help="Read the active tab from a running Chromium.",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode.",
)
def web(port: int, tab_url: Optional[str], browser: bool, debug: bool):
    """
    Serve the survey popup as a JSON API.

    Example:

        $ python -m survey_popup web --port 8080 -u https://example.com
    """
    from .web.app import create_app

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = SurveyConfig.from_env()
    app = create_app(build_session(config, tab_url=tab_url, use_browser=browser))

    click.echo(click.style(f"Survey popup API on http://localhost:{port}/api/view", fg="cyan"))
    app.run(host="127.0.0.1", port=port, debug=debug, threaded=True)


@cli.command()
def version():
    """Show version information."""
    click.echo(f"Survey Popup v{__version__}")


def run_cli():
    """Entry point for CLI."""
    cli()


# =============================================================================
# MODULE ENTRY POINT
# =============================================================================

if __name__ == "__main__":
    run_cli()
