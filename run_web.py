import argparse
import logging
import os
import sys
from datetime import datetime


def setup_logging(log_dir: str = None, debug: bool = False):
    """Log to the console and, optionally, to a timestamped file."""
    handlers = [logging.StreamHandler(sys.stdout)]
    log_file = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f'survey_popup_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log')
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )
    return log_file


def main():
    parser = argparse.ArgumentParser(description='Run Survey Popup web shell')
    parser.add_argument('--port', type=int, default=5000, help='Port to run on (default: 5000)')
    parser.add_argument('--tab-url', default=None, help='URL of the page the survey is opened on')
    parser.add_argument('--browser', action='store_true', help='Read the active tab from a running Chromium')
    parser.add_argument('--log-dir', default=None, help='Also write logs to this directory')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    args = parser.parse_args()

    log_file = setup_logging(args.log_dir, args.debug)
    logger = logging.getLogger(__name__)

    try:
        from survey_popup.config import SurveyConfig
        from survey_popup.main import build_session
        from survey_popup.web.app import create_app
    except ImportError as e:
        print(f"Error: {e}")
        print("\nInstall the project first:")
        print("  pip install -e .")
        sys.exit(1)

    config = SurveyConfig.from_env()
    app = create_app(build_session(config, tab_url=args.tab_url, use_browser=args.browser))

    print(f"""
===============================================================
           SURVEY POPUP WEB SHELL
===============================================================
  View:  http://localhost:{args.port}/api/view
  Logs:  {log_file or 'console only'}
  Press Ctrl+C to stop
===============================================================
    """)

    try:
        app.run(host='127.0.0.1', port=args.port, debug=args.debug, threaded=True)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")


if __name__ == '__main__':
    main()
