"""
Test helpers and utilities for nscert tests.

This module provides helper classes and functions to simplify test setup and assertions.
"""
from unittest.mock import MagicMock, patch
from contextlib import contextmanager
import mock_data


class MockBuilder:
    """Builder pattern for creating consistent mock environments."""

    def __init__(self):
        self.subprocess_responses = []
        self.which_mapping = {}
        self.url_responses = dict(mock_data.DEFAULT_RESPONSES)
        self.status_code = 307

    def with_tenant_status(self, status_code):
        """Set the status returned by the /locallogin request (None = unreachable)."""
        self.status_code = status_code
        return self

    def with_tool(self, command):
        """Configure a tool executable to be found on PATH."""
        self.which_mapping[command] = mock_data.TOOL_PATHS.get(command, f"/usr/local/bin/{command}")
        return self

    def with_tools(self, *commands):
        """Configure multiple tools to be available."""
        for command in commands:
            self.with_tool(command)
        return self

    def with_url(self, url, body):
        """Serve body for url (None simulates a failed download)."""
        self.url_responses[url] = body
        return self

    def with_failed_download(self, url):
        return self.with_url(url, None)

    def with_subprocess_response(self, returncode=0, stdout="", stderr=""):
        """Add a subprocess response to the queue."""
        self.subprocess_responses.append(
            MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)
        )
        return self

    def build(self):
        """Build and return the mock configuration."""
        queue = list(self.subprocess_responses)

        def which_side_effect(cmd):
            return self.which_mapping.get(cmd)

        def fetch_side_effect(url):
            return self.url_responses.get(url)

        def subprocess_side_effect(*args, **kwargs):
            if queue:
                return queue.pop(0)
            return MagicMock(returncode=0, stdout="", stderr="")

        return {
            'which_side_effect': which_side_effect,
            'fetch_side_effect': fetch_side_effect,
            'subprocess_side_effect': subprocess_side_effect,
            'status_code': self.status_code,
        }


@contextmanager
def mock_nscert_environment(mock_config):
    """Context manager that stubs PATH lookups, subprocesses and the network."""
    with patch('nscert.shutil.which') as mock_which, \
         patch('nscert.subprocess.run') as mock_subprocess, \
         patch('nscert.NetskopeCertTool.fetch') as mock_fetch, \
         patch('nscert.NetskopeCertTool.login_status') as mock_login_status:

        mock_which.side_effect = mock_config['which_side_effect']
        mock_subprocess.side_effect = mock_config['subprocess_side_effect']
        mock_fetch.side_effect = mock_config['fetch_side_effect']
        mock_login_status.return_value = mock_config['status_code']

        yield {
            'which': mock_which,
            'subprocess': mock_subprocess,
            'fetch': mock_fetch,
            'login_status': mock_login_status,
        }


def assert_subprocess_called_with(mock_subprocess, command_parts):
    """Assert that subprocess was called with specific command parts."""
    for call in mock_subprocess.call_args_list:
        args = call[0][0] if call[0] else []
        if all(part in args for part in command_parts):
            return True

    actual_calls = []
    for call in mock_subprocess.call_args_list:
        args = call[0][0] if call[0] else []
        actual_calls.append(' '.join(args))

    raise AssertionError(
        f"Expected subprocess call with {command_parts}\n"
        f"Actual calls:\n" + '\n'.join(f"  - {call}" for call in actual_calls)
    )


def fetched_urls(mock_fetch):
    return [call[0][0] for call in mock_fetch.call_args_list]


def answers(*replies):
    """Scripted replacement for input(); raises EOFError when exhausted."""
    queue = list(replies)
    prompts = []

    def fake_input(prompt=''):
        prompts.append(prompt)
        if not queue:
            raise EOFError
        return queue.pop(0)

    fake_input.prompts = prompts
    return fake_input


class NscertTestCase:
    """Base class providing common test functionality."""

    @staticmethod
    def create_tool(profile_path, debug=False, dry_run=False, selected_tools=None,
                    environ=None, input_func=None):
        """Create a NetskopeCertTool writing to a throwaway shell profile."""
        import nscert
        store = nscert.ShellProfileStore(str(profile_path), environ=environ or {})
        with patch('nscert.platform.system', return_value='Darwin'):
            return nscert.NetskopeCertTool(
                debug=debug,
                dry_run=dry_run,
                selected_tools=selected_tools or [],
                env_store=store,
                input_func=input_func or answers(),
            )

    @staticmethod
    def make_config(cert_dir, **overrides):
        import nscert
        values = {
            'tenant_name': mock_data.TENANT_NAME,
            'org_key': mock_data.ORG_KEY,
            'cert_dir': str(cert_dir),
        }
        values.update(overrides)
        return nscert.RunConfig(**values)
