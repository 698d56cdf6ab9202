"""
Test suite for Survey Popup.

Test Structure:
- test_models.py: Question parsing and session snapshots
- test_config.py: Configuration and domain gating
- test_client.py: Survey service client against a stub transport
- test_probe.py: Host context probes
- test_session.py: Session state machine
- test_renderer.py: View projection
- test_web.py: Flask JSON shell
- test_cli.py: Terminal shell and CLI

Run all tests:
    pytest tests/ -v
"""
