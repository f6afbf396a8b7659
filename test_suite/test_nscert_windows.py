"""
Tests for nscert_windows.py

These tests verify the Windows front end: registry-backed environment
variables, the Windows defaults and the tenant-only bundle default.
"""
import os
import pytest
from unittest.mock import patch, MagicMock

from helpers import MockBuilder, mock_nscert_environment, NscertTestCase, answers
import mock_data

import nscert
import nscert_windows
from nscert_windows import WindowsRegistryStore, NetskopeCertToolWindows


BUNDLE_PATH = "C:\\Netskope\\netskope-cert-bundle.pem"


@pytest.fixture
def mock_winreg():
    """Stand-in for the winreg module on non-Windows hosts."""
    with patch('nscert_windows.winreg') as registry:
        registry.QueryValueEx.side_effect = FileNotFoundError
        yield registry


def create_windows_tool(store, **kwargs):
    with patch('nscert_windows.platform.system', return_value='Windows'):
        return NetskopeCertToolWindows(env_store=store, **kwargs)


class TestWindowsRegistryStore:
    """Tests for the HKCU\\Environment backed store."""

    def test_read_returns_registry_value(self, mock_winreg):
        mock_winreg.QueryValueEx.side_effect = None
        mock_winreg.QueryValueEx.return_value = (BUNDLE_PATH, 2)
        store = WindowsRegistryStore(environ={'SSL_CERT_FILE': 'C:\\other.pem'})

        assert store.read('SSL_CERT_FILE') == BUNDLE_PATH
        mock_winreg.CloseKey.assert_called_once()

    def test_read_falls_back_to_process_environment(self, mock_winreg):
        store = WindowsRegistryStore(environ={'SSL_CERT_FILE': BUNDLE_PATH})

        assert store.read('SSL_CERT_FILE') == BUNDLE_PATH
        assert store.read('AWS_CA_BUNDLE') is None

    def test_read_without_registry(self):
        with patch('nscert_windows.winreg', None):
            store = WindowsRegistryStore(environ={'NODE_EXTRA_CA_CERTS': BUNDLE_PATH})
            assert store.read('NODE_EXTRA_CA_CERTS') == BUNDLE_PATH

    def test_write_sets_expandable_user_value(self, mock_winreg):
        store = WindowsRegistryStore(environ={})

        with patch.object(WindowsRegistryStore, 'broadcast_environment_change') as mock_broadcast:
            assert store.write('NODE_EXTRA_CA_CERTS', BUNDLE_PATH) is True
            mock_broadcast.assert_called_once()

        key = mock_winreg.OpenKey.return_value
        mock_winreg.OpenKey.assert_called_once_with(
            mock_winreg.HKEY_CURRENT_USER, "Environment", 0, mock_winreg.KEY_SET_VALUE
        )
        mock_winreg.SetValueEx.assert_called_once_with(
            key, 'NODE_EXTRA_CA_CERTS', 0, mock_winreg.REG_EXPAND_SZ, BUNDLE_PATH
        )

    def test_write_failure_is_reported(self, mock_winreg):
        mock_winreg.OpenKey.side_effect = PermissionError("Access is denied")
        printer = MagicMock()
        store = WindowsRegistryStore(environ={}, printer=printer)

        assert store.write('SSL_CERT_FILE', BUNDLE_PATH) is False
        printer.print_error.assert_called_once()

    def test_write_without_registry(self):
        with patch('nscert_windows.winreg', None):
            store = WindowsRegistryStore(environ={})
            assert store.write('SSL_CERT_FILE', BUNDLE_PATH) is False

    def test_write_does_not_touch_process_environment(self, mock_winreg, monkeypatch):
        monkeypatch.delenv('AWS_CA_BUNDLE', raising=False)
        store = WindowsRegistryStore()

        with patch.object(WindowsRegistryStore, 'broadcast_environment_change'):
            store.write('AWS_CA_BUNDLE', BUNDLE_PATH)

        assert 'AWS_CA_BUNDLE' not in os.environ


class TestWindowsToolConfigurator(NscertTestCase):
    """The shared configurator driven through the registry store."""

    def test_unconfigured_tool_written_to_registry(self, mock_winreg):
        mock_config = MockBuilder().with_tool('node').build()
        store = WindowsRegistryStore(environ={})

        with mock_nscert_environment(mock_config), \
             patch.object(WindowsRegistryStore, 'broadcast_environment_change'):
            tool = create_windows_tool(store)
            tool.configure_tool(nscert.TOOLS_REGISTRY['node'], BUNDLE_PATH)

        mock_winreg.SetValueEx.assert_called_once_with(
            mock_winreg.OpenKey.return_value, 'NODE_EXTRA_CA_CERTS', 0,
            mock_winreg.REG_EXPAND_SZ, BUNDLE_PATH
        )
        assert tool.env_modified is True

    def test_configured_tool_left_alone(self, mock_winreg):
        mock_winreg.QueryValueEx.side_effect = None
        mock_winreg.QueryValueEx.return_value = (BUNDLE_PATH, 2)
        mock_config = MockBuilder().with_tool('az').build()

        with mock_nscert_environment(mock_config):
            tool = create_windows_tool(WindowsRegistryStore(environ={}))
            tool.configure_tool(nscert.TOOLS_REGISTRY['az'], BUNDLE_PATH)

        mock_winreg.SetValueEx.assert_not_called()
        assert tool.env_modified is False

    def test_registry_failure_is_tool_local(self, mock_winreg, capsys):
        mock_winreg.OpenKey.side_effect = PermissionError("Access is denied")
        mock_config = MockBuilder().with_tools('git', 'node').build()
        store = WindowsRegistryStore(environ={})

        with mock_nscert_environment(mock_config):
            tool = create_windows_tool(store)
            store.printer = tool
            tool.configure_tools(nscert.RunConfig(
                tenant_name=mock_data.TENANT_NAME,
                org_key=mock_data.ORG_KEY,
                cert_dir="C:\\Netskope",
            ))

        out = capsys.readouterr().out
        assert "Failed to set environment variable GIT_SSL_CAPATH" in out
        assert "Failed to set environment variable NODE_EXTRA_CA_CERTS" in out
        assert tool.env_modified is False


class TestWindowsDefaults(NscertTestCase):
    """Windows specific defaults and paths."""

    def test_default_bundle_directory(self, mock_winreg):
        fake_input = answers(mock_data.TENANT_NAME, mock_data.ORG_KEY, "", "")
        tool = create_windows_tool(WindowsRegistryStore(environ={}), input_func=fake_input)

        config = tool.resolve_config({})

        assert config.cert_dir == "C:\\Netskope"
        assert "[C:\\Netskope]" in fake_input.prompts[3]

    def test_storage_explorer_under_appdata(self, mock_winreg, tmp_path, monkeypatch):
        monkeypatch.setenv('APPDATA', str(tmp_path))
        tool = create_windows_tool(WindowsRegistryStore(environ={}))

        assert tool.storage_explorer_cert_dir() == os.path.join(str(tmp_path), "StorageExplorer", "certs")

    def test_bundle_copied_to_storage_explorer(self, mock_winreg, tmp_path, monkeypatch, cert_dir):
        monkeypatch.setenv('APPDATA', str(tmp_path))
        explorer_dir = tmp_path / "StorageExplorer" / "certs"
        explorer_dir.mkdir(parents=True)
        config = self.make_config(cert_dir)
        with open(config.bundle_path, 'wb') as f:
            f.write(mock_data.EXPECTED_BUNDLE)

        tool = create_windows_tool(WindowsRegistryStore(environ={}))
        tool.setup_storage_explorer(config)

        assert (explorer_dir / config.cert_name).read_bytes() == mock_data.EXPECTED_BUNDLE

    def test_warns_when_not_on_windows(self, capsys):
        with patch('nscert_windows.platform.system', return_value='Darwin'):
            NetskopeCertToolWindows(env_store=MagicMock())

        assert "designed for Windows" in capsys.readouterr().out


class TestWindowsCLI:
    """Tests for the Windows command-line entry point."""

    @pytest.fixture(autouse=True)
    def clean_presets(self, monkeypatch):
        for env_name in nscert.PRESET_ENV_VARS.values():
            monkeypatch.delenv(env_name, raising=False)

    def run_main(self, argv):
        with patch('nscert_windows.sys.argv', argv), \
             patch('nscert_windows.NetskopeCertToolWindows') as mock_class, \
             patch('nscert_windows.sys.exit') as mock_exit:
            mock_instance = MagicMock()
            mock_instance.main.return_value = 0
            mock_class.return_value = mock_instance

            nscert_windows.main()

            mock_exit.assert_called_with(0)
            return mock_class, mock_instance.main.call_args[0][0]

    def test_tenant_bundle_enabled_by_default(self):
        _, presets = self.run_main(['nscert_windows.py', '--tenant', mock_data.TENANT_NAME])

        assert presets['tenant_name'] == mock_data.TENANT_NAME
        assert presets['tenant_bundle'] is True

    def test_tenant_bundle_can_be_disabled(self):
        mock_class, presets = self.run_main(
            ['nscert_windows.py', '--no-tenant-bundle', '--debug', '--tools', 'node']
        )

        assert presets['tenant_bundle'] is False
        mock_class.assert_called_with(debug=True, dry_run=False, selected_tools=['node'])


@pytest.mark.integration
class TestWindowsEndToEnd(NscertTestCase):

    def test_fresh_run_writes_both_bundles(self, mock_winreg, tenant_presets, cert_dir,
                                           tmp_path, monkeypatch):
        monkeypatch.setenv('APPDATA', str(tmp_path))
        presets = dict(tenant_presets, tenant_bundle=True)
        mock_config = MockBuilder().with_tools('git', 'npm').build()
        bundle_path = os.path.join(str(cert_dir), "netskope-cert-bundle.pem")

        with mock_nscert_environment(mock_config) as mocks, \
             patch.object(WindowsRegistryStore, 'broadcast_environment_change'):
            tool = create_windows_tool(WindowsRegistryStore(environ={}))
            assert tool.main(presets) == nscert.EXIT_OK
            assert mocks['subprocess'].call_count == 1

        assert (cert_dir / "netskope-cert-bundle.pem").read_bytes() == mock_data.EXPECTED_BUNDLE
        assert (cert_dir / "nscacert.pem").read_bytes() == mock_data.EXPECTED_TENANT_BUNDLE
        mock_winreg.SetValueEx.assert_called_once_with(
            mock_winreg.OpenKey.return_value, 'GIT_SSL_CAPATH', 0,
            mock_winreg.REG_EXPAND_SZ, bundle_path
        )


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
