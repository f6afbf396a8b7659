#!/usr/bin/env python3

import os
import sys
import platform

try:
    import winreg
except ImportError:  # not on Windows
    winreg = None

import nscert
from nscert import NetskopeCertTool, TOOLS_REGISTRY, EXIT_OK

DEFAULT_CERT_DIR = "C:\\Netskope"

ENVIRONMENT_KEY = "Environment"


class WindowsRegistryStore:
    """Persists user-scope environment variables in HKCU\\Environment."""

    def __init__(self, environ=None, printer=None):
        self.environ = os.environ if environ is None else environ
        self.printer = printer

    @property
    def location(self):
        return "HKEY_CURRENT_USER\\Environment"

    def read(self, var_name):
        """Registry value if present, else the process environment."""
        if winreg is not None:
            try:
                key = winreg.OpenKey(
                    winreg.HKEY_CURRENT_USER, ENVIRONMENT_KEY, 0, winreg.KEY_READ
                )
                try:
                    value, _ = winreg.QueryValueEx(key, var_name)
                    return value
                finally:
                    winreg.CloseKey(key)
            except FileNotFoundError:
                pass
            except OSError as e:
                self._debug(f"Error reading environment variable {var_name}: {e}")
        return self.environ.get(var_name)

    def write(self, var_name, value):
        if winreg is None:
            self._error(f"Cannot set {var_name}: the Windows registry is not available")
            return False

        try:
            key = winreg.OpenKey(
                winreg.HKEY_CURRENT_USER, ENVIRONMENT_KEY, 0, winreg.KEY_SET_VALUE
            )
            try:
                winreg.SetValueEx(key, var_name, 0, winreg.REG_EXPAND_SZ, value)
            finally:
                winreg.CloseKey(key)
        except OSError as e:
            self._error(f"Failed to set environment variable {var_name}: {e}")
            return False

        self.broadcast_environment_change()
        return True

    def broadcast_environment_change(self):
        """Tell running applications (Explorer, new consoles) to reload the environment."""
        try:
            import ctypes
            from ctypes import wintypes

            HWND_BROADCAST = 0xFFFF
            WM_SETTINGCHANGE = 0x001A
            SMTO_ABORTIFHUNG = 0x0002
            ctypes.windll.user32.SendMessageTimeoutW(
                HWND_BROADCAST,
                WM_SETTINGCHANGE,
                0,
                "Environment",
                SMTO_ABORTIFHUNG,
                5000,
                ctypes.byref(wintypes.DWORD()),
            )
        except (ImportError, AttributeError, OSError) as e:
            self._debug(f"Environment change broadcast failed: {e}")

    def _debug(self, msg):
        if self.printer is not None:
            self.printer.print_debug(msg)

    def _error(self, msg):
        if self.printer is not None:
            self.printer.print_error(msg)


class NetskopeCertToolWindows(NetskopeCertTool):
    platform_label = "Windows"
    default_cert_dir = DEFAULT_CERT_DIR

    def check_platform(self):
        if platform.system() != "Windows":
            self.print_warn(
                "This script is designed for Windows. Most features will not work correctly."
            )

    def create_env_store(self):
        self.print_info("Using user-scope environment variables (HKEY_CURRENT_USER)")
        return WindowsRegistryStore(printer=self)

    def storage_explorer_cert_dir(self):
        appdata = os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
        return os.path.join(appdata, "StorageExplorer", "certs")

    def print_reload_hint(self):
        self.print_warn("Environment variables were modified.")
        self.print_warn("Please restart your command prompt or PowerShell session")
        self.print_warn("Or run: refreshenv (if using Chocolatey)")


def main():
    parser = nscert.build_parser(
        "Netskope SSL certificate bundle configurator for Windows",
        DEFAULT_CERT_DIR,
        "python nscert_windows.py",
    )
    parser.set_defaults(tenant_bundle=True)
    parser.add_argument(
        "--no-tenant-bundle",
        dest="tenant_bundle",
        action="store_false",
        help=f"Skip writing {nscert.TENANT_BUNDLE_NAME} next to the bundle",
    )
    args = parser.parse_args()

    if args.list_tools:
        nscert.list_tools(TOOLS_REGISTRY)
        sys.exit(EXIT_OK)

    presets = nscert.load_presets(args)
    presets["tenant_bundle"] = args.tenant_bundle

    tool = NetskopeCertToolWindows(
        debug=args.debug,
        dry_run=args.dry_run,
        selected_tools=nscert.parse_selected_tools(args.tools),
    )
    sys.exit(tool.main(presets))


if __name__ == "__main__":
    main()
