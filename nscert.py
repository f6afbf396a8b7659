#!/usr/bin/env python3

import os
import sys
import re
import shlex
import shutil
import ssl
import argparse
import platform
import subprocess
import urllib.request
import urllib.error
import http.client
from dataclasses import dataclass, field
from datetime import datetime

# Version and metadata
__version__ = "1.2.0"
__description__ = "Netskope SSL certificate bundle configurator for CLI tools"
__author__ = "Dudu Akiva & Kostya Maryan"

# Colors for output
RED = '\033[0;31m'
GREEN = '\033[0;32m'
YELLOW = '\033[1;33m'
BLUE = '\033[0;34m'
NC = '\033[0m'  # No Color

# Bundle defaults
DEFAULT_CERT_NAME = "netskope-cert-bundle.pem"
DEFAULT_CERT_DIR = "~/netskope"
TENANT_BUNDLE_NAME = "nscacert.pem"

MOZILLA_ROOTS_URL = (
    "https://ccadb-public.secure.force.com/mozilla/IncludedRootsPEMTxt"
    "?TrustBitsInclude=Websites"
)

# Failures that mean the request never produced a usable response
REQUEST_ERRORS = (urllib.error.URLError, http.client.HTTPException, OSError, ValueError)

# First response from /locallogin; redirects are not followed
REACHABLE_STATUS_CODES = frozenset({200, 302, 307})

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

# Environment variables consulted when a command-line preset is missing
PRESET_ENV_VARS = {
    'tenant_name': 'NETSKOPE_TENANT',
    'org_key': 'NETSKOPE_ORG_KEY',
    'cert_name': 'NETSKOPE_CERT_NAME',
    'cert_dir': 'NETSKOPE_CERT_DIR',
    'recreate_cert': 'NETSKOPE_RECREATE_CERT',
}

TRUTHY_VALUES = {'1', 'true', 'yes', 'y'}


@dataclass(frozen=True)
class RunConfig:
    """Parameters of a single run, resolved once at startup."""
    tenant_name: str
    org_key: str
    cert_name: str = DEFAULT_CERT_NAME
    cert_dir: str = field(default_factory=lambda: os.path.expanduser(DEFAULT_CERT_DIR))
    recreate_cert: bool = False
    debug: bool = False
    dry_run: bool = False
    tenant_bundle: bool = False

    @property
    def bundle_path(self):
        return os.path.join(self.cert_dir, self.cert_name)

    @property
    def tenant_bundle_path(self):
        return os.path.join(self.cert_dir, TENANT_BUNDLE_NAME)

    @property
    def login_url(self):
        return f"https://{self.tenant_name}/locallogin"

    @property
    def ca_cert_url(self):
        return f"https://addon-{self.tenant_name}/config/ca/cert?orgkey={self.org_key}"

    @property
    def org_cert_url(self):
        return f"https://addon-{self.tenant_name}/config/org/cert?orgkey={self.org_key}"


@dataclass(frozen=True)
class ToolSpec:
    """How to detect one tool and point it at the bundle."""
    name: str
    env_var: str = ""
    command: str = ""
    post_command: str = ""
    tags: tuple = ()

    def is_installed(self):
        return bool(self.command) and shutil.which(self.command) is not None

    def is_configured(self, store, bundle_path):
        """True when the persisted variable already points at bundle_path."""
        if not self.env_var:
            return False
        return store.read(self.env_var) == bundle_path

    def render_post_command(self, bundle_path):
        """Split the template into argv and substitute the bundle path."""
        if not self.post_command:
            return []
        return [part.replace('{bundle}', bundle_path) for part in shlex.split(self.post_command)]


# Tools are configured in this order
TOOLS_REGISTRY = {
    'git': ToolSpec('Git', 'GIT_SSL_CAPATH', 'git',
                    tags=('git', 'version-control')),
    'openssl': ToolSpec('OpenSSL', 'SSL_CERT_FILE', 'openssl',
                        tags=('openssl', 'ssl')),
    'curl': ToolSpec('cURL', 'SSL_CERT_FILE', 'curl',
                     tags=('curl', 'http')),
    'requests': ToolSpec('Python Requests Library', 'REQUESTS_CA_BUNDLE', 'python3',
                         tags=('requests', 'python', 'python3')),
    'aws': ToolSpec('AWS CLI', 'AWS_CA_BUNDLE', 'aws',
                    tags=('aws', 'awscli', 'cloud')),
    'gcloud': ToolSpec('Google Cloud CLI', '', 'gcloud',
                       'gcloud config set core/custom_ca_certs_file {bundle}',
                       tags=('gcloud', 'google-cloud', 'gcp', 'cloud')),
    'npm': ToolSpec('NodeJS Package Manager (NPM)', '', 'npm',
                    'npm config set cafile {bundle}',
                    tags=('npm', 'node-npm', 'javascript', 'js')),
    'node': ToolSpec('NodeJS', 'NODE_EXTRA_CA_CERTS', 'node',
                     tags=('node', 'nodejs', 'node-npm', 'javascript', 'js')),
    'ruby': ToolSpec('Ruby', 'SSL_CERT_FILE', 'ruby',
                     tags=('ruby',)),
    'composer': ToolSpec('PHP Composer', '', 'composer',
                         'composer config --global cafile {bundle}',
                         tags=('composer', 'php')),
    'go': ToolSpec('GoLang', 'SSL_CERT_FILE', 'go',
                   tags=('go', 'golang')),
    'az': ToolSpec('Azure CLI', 'REQUESTS_CA_BUNDLE', 'az',
                   tags=('az', 'azure', 'cloud')),
    'pip': ToolSpec('Python PIP', 'REQUESTS_CA_BUNDLE', 'pip3',
                    tags=('pip', 'pip3', 'python')),
    'oci': ToolSpec('Oracle Cloud CLI', 'REQUESTS_CA_BUNDLE', 'oci',
                    tags=('oci', 'oci-cli', 'oracle', 'cloud')),
    'cargo': ToolSpec('Cargo Package Manager', 'SSL_CERT_FILE', 'cargo',
                      tags=('cargo', 'rust')),
    'yarn': ToolSpec('Yarn', '', 'yarnpkg',
                     'yarnpkg config set httpsCaFilePath {bundle}',
                     tags=('yarn', 'yarnpkg', 'javascript', 'js')),
}


def read_exports(profile_path):
    """Parse `export NAME=value` lines from a shell startup file."""
    exports = {}
    if not os.path.exists(profile_path):
        return exports

    with open(profile_path, 'r') as f:
        for raw_line in f:
            line = raw_line.strip()
            if not line.startswith('export '):
                continue
            key_value = line[len('export '):]
            if '=' not in key_value:
                continue
            key, value = key_value.split('=', 1)
            exports[key.strip()] = unquote_shell_value(value.strip())
    return exports


def quote_shell_value(value):
    """Double-quote value so the shell reads it back literally."""
    escaped = re.sub(r'([\\"$`])', r'\\\1', value)
    return f'"{escaped}"'


def unquote_shell_value(value):
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return re.sub(r'\\([\\"$`])', r'\1', value[1:-1])
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1]
    return value


class ShellProfileStore:
    """Persists variables as export lines in the operator's shell startup file.

    Values take effect in the next shell session; the running process's
    environment is left alone.
    """

    def __init__(self, profile_path, environ=None):
        self.profile_path = profile_path
        self.environ = os.environ if environ is None else environ

    @property
    def location(self):
        return self.profile_path

    def read(self, var_name):
        exports = read_exports(self.profile_path)
        if var_name in exports:
            return exports[var_name]
        return self.environ.get(var_name)

    def write(self, var_name, value):
        with open(self.profile_path, 'a') as f:
            f.write(f'\nexport {var_name}={quote_shell_value(value)}\n')
        return True


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


def insecure_ssl_context():
    """SSL context that skips verification; the trust material does not exist yet."""
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def is_truthy(value):
    if isinstance(value, bool):
        return value
    return str(value or '').strip().lower() in TRUTHY_VALUES


def load_presets(args, environ=None):
    """Merge command-line presets with NETSKOPE_* environment variables."""
    environ = os.environ if environ is None else environ
    presets = {}
    for field, env_name in PRESET_ENV_VARS.items():
        value = getattr(args, field, None)
        if not value:
            value = environ.get(env_name, '')
        presets[field] = value
    presets['recreate_cert'] = is_truthy(presets['recreate_cert'])
    return presets


def mask_secret(value):
    if not value:
        return ''
    if len(value) <= 4:
        return '*' * len(value)
    return '*' * (len(value) - 4) + value[-4:]


class NetskopeCertTool:
    platform_label = 'macOS/Linux'
    default_cert_dir = DEFAULT_CERT_DIR

    def __init__(self, debug=False, dry_run=False, selected_tools=None,
                 env_store=None, tools_registry=None, input_func=input):
        self.debug = debug
        self.dry_run = dry_run
        self.selected_tools = selected_tools or []
        self.env_store = env_store
        self.tools_registry = TOOLS_REGISTRY if tools_registry is None else tools_registry
        self.input = input_func
        self.env_modified = False

        self.check_platform()

    def check_platform(self):
        if platform.system() == 'Windows':
            self.print_warn("This script is designed for macOS/Linux. Use nscert_windows.py on Windows.")

    def is_debug_mode(self):
        return self.debug

    def should_process_tool(self, tool_key):
        """Check if a tool should be processed based on selected tools."""
        if not self.selected_tools:
            return True

        spec = self.tools_registry.get(tool_key)
        if spec is None:
            return False

        tags = [tag.lower() for tag in spec.tags]
        for selection in self.selected_tools:
            selection_lower = selection.lower()
            if selection_lower == tool_key or selection_lower in tags:
                return True
        return False

    def validate_selected_tools(self):
        """Return the selections that match no tool key or tag."""
        invalid_tools = []
        for selection in self.selected_tools:
            selection_lower = selection.lower()
            found = any(
                selection_lower == tool_key or selection_lower in [tag.lower() for tag in spec.tags]
                for tool_key, spec in self.tools_registry.items()
            )
            if not found:
                invalid_tools.append(selection)
        return invalid_tools

    # Printing functions
    def timestamp(self):
        return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    def print_info(self, msg):
        print(f"[{self.timestamp()}] {GREEN}[INFO]{NC} {msg}")

    def print_warn(self, msg):
        print(f"[{self.timestamp()}] {YELLOW}[WARN]{NC} {msg}")

    def print_error(self, msg):
        print(f"[{self.timestamp()}] {RED}[ERROR]{NC} {msg}")

    def print_action(self, msg):
        print(f"[{self.timestamp()}] {YELLOW}[ACTION]{NC} {msg}")

    def print_debug(self, msg):
        if self.is_debug_mode():
            print(f"[{self.timestamp()}] {BLUE}[DEBUG]{NC} {msg}", file=sys.stderr)

    def detect_shell(self):
        """Detect the user's login shell with fallbacks."""
        shell_path = os.environ.get('SHELL')

        if not shell_path:
            try:
                import pwd
                shell_path = pwd.getpwuid(os.getuid()).pw_shell
            except (ImportError, KeyError):
                shell_path = None

        if not shell_path:
            shell_path = '/bin/zsh'

        return os.path.basename(shell_path)

    def get_shell_config(self, shell_type):
        """Get the startup file that receives export lines."""
        home = os.path.expanduser("~")
        if shell_type == 'bash':
            return os.path.join(home, '.bash_profile')
        elif shell_type == 'zsh':
            return os.path.join(home, '.zshenv')
        return os.path.join(home, '.profile')

    def create_env_store(self):
        shell_type = self.detect_shell()
        shell_config = self.get_shell_config(shell_type)
        self.print_info(f"Shell used is [{shell_type}], configuration file [{shell_config}]")
        return ShellProfileStore(shell_config)

    def get_env_store(self):
        if self.env_store is None:
            self.env_store = self.create_env_store()
        return self.env_store

    def prompt(self, message, default=None, required=False):
        """Prompt until an answer is given (required) or fall back to default."""
        while True:
            answer = self.input(message).strip()
            if answer:
                return answer
            if default is not None:
                return default
            if not required:
                return ''

    def resolve_config(self, presets):
        """Fill every RunConfig field from presets or interactive prompts."""
        tenant_name = presets.get('tenant_name')
        if tenant_name:
            self.print_info("Using configured tenant_name")
        else:
            self.print_info("tenant_name not provided.")
            tenant_name = self.prompt("Please provide full tenant name (ex: mytenant.eu.goskope.com): ",
                                      required=True)

        org_key = presets.get('org_key')
        if org_key:
            self.print_info("Using configured org_key")
        else:
            self.print_info("org_key not provided.")
            org_key = self.prompt("Please provide tenant org_key: ", required=True)

        cert_name = presets.get('cert_name')
        if cert_name:
            self.print_info("Using configured cert_name")
        else:
            cert_name = self.prompt(f"Please provide certificate bundle name [{DEFAULT_CERT_NAME}]: ",
                                    default=DEFAULT_CERT_NAME)

        cert_dir = presets.get('cert_dir')
        if cert_dir:
            self.print_info("Using configured cert_dir")
        else:
            cert_dir = self.prompt(f"Please provide certificate bundle location [{self.default_cert_dir}]: ",
                                   default=self.default_cert_dir)

        return RunConfig(
            tenant_name=tenant_name,
            org_key=org_key,
            cert_name=cert_name,
            cert_dir=os.path.expanduser(cert_dir),
            recreate_cert=bool(presets.get('recreate_cert')),
            debug=self.debug,
            dry_run=self.dry_run,
            tenant_bundle=bool(presets.get('tenant_bundle')),
        )

    def print_parameters(self, config):
        print("Script parameters:")
        print(f"tenant_name: \t [{config.tenant_name}]")
        print(f"org_key: \t [{mask_secret(config.org_key)}]")
        print(f"cert_name: \t [{config.cert_name}]")
        print(f"cert_dir: \t [{config.cert_dir}]")
        print(f"recreate_cert: \t [{str(config.recreate_cert).lower()}]")
        print()

    def build_opener(self, follow_redirects=True):
        handlers = [urllib.request.HTTPSHandler(context=insecure_ssl_context())]
        if not follow_redirects:
            handlers.append(_NoRedirectHandler())
        return urllib.request.build_opener(*handlers)

    def login_status(self, url):
        """Return the HTTP status of the first response, or None if unreachable."""
        opener = self.build_opener(follow_redirects=False)
        try:
            with opener.open(url) as response:
                return response.status
        except urllib.error.HTTPError as e:
            # Redirects and error statuses both surface here
            return e.code
        except REQUEST_ERRORS as e:
            # Malformed tenant names end up here as InvalidURL
            self.print_debug(f"Request to {url} failed: {e}")
            return None

    def fetch(self, url):
        """Download url and return its body, or None on any failure."""
        self.print_debug(f"Downloading {url}")
        opener = self.build_opener(follow_redirects=True)
        try:
            with opener.open(url) as response:
                body = response.read()
        except urllib.error.HTTPError as e:
            self.print_error(f"Download failed with HTTP {e.code}: {url}")
            return None
        except REQUEST_ERRORS as e:
            self.print_error(f"Download failed: {url} ({e})")
            return None

        if not body:
            self.print_error(f"Download returned an empty body: {url}")
            return None
        return body

    def check_tenant_reachable(self, config):
        self.print_info(f"Testing if tenant [{config.tenant_name}] is reachable")
        status_code = self.login_status(config.login_url)
        self.print_debug(f"{config.login_url} returned status {status_code}")

        if status_code not in REACHABLE_STATUS_CODES:
            self.print_error("Tenant Unreachable")
            return False

        self.print_info("Tenant Reachable")
        return True

    def write_file_atomic(self, path, chunks):
        """Replace path wholesale with the concatenated chunks."""
        temp_path = f"{path}.tmp"
        try:
            with open(temp_path, 'wb') as f:
                for chunk in chunks:
                    f.write(chunk)
            os.replace(temp_path, path)
        except OSError:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def create_cert_bundle(self, config):
        """Download the tenant and public roots and write the bundle."""
        self.print_info("Creating cert bundle:")

        if self.dry_run:
            self.print_action(f"Would download {config.ca_cert_url}")
            self.print_action(f"Would download {config.org_cert_url}")
            self.print_action(f"Would download {MOZILLA_ROOTS_URL}")
            self.print_action(f"Would write cert bundle to {config.bundle_path}")
            if config.tenant_bundle:
                self.print_action(f"Would write tenant certificates to {config.tenant_bundle_path}")
            return True

        chunks = []
        for url in (config.ca_cert_url, config.org_cert_url, MOZILLA_ROOTS_URL):
            body = self.fetch(url)
            if body is None:
                self.print_error(f"Cert bundle not written; [{config.bundle_path}] left unchanged")
                return False
            chunks.append(body)

        self.write_file_atomic(config.bundle_path, chunks)
        self.print_info(f"Cert bundle written to [{config.bundle_path}]")

        if config.tenant_bundle:
            self.write_file_atomic(config.tenant_bundle_path, chunks[:2])
            self.print_info(f"Tenant certificates written to [{config.tenant_bundle_path}]")

        return True

    def ensure_cert_bundle(self, config):
        """Create the bundle unless it exists and recreation is declined."""
        if not os.path.isdir(config.cert_dir):
            self.print_info(f"[{config.cert_dir}] directory does not exist.")
            if self.dry_run:
                self.print_action(f"Would create directory [{config.cert_dir}]")
            else:
                self.print_info(f"creating directory [{config.cert_dir}]")
                os.makedirs(config.cert_dir, exist_ok=True)

        if not os.path.exists(config.bundle_path):
            return self.create_cert_bundle(config)

        self.print_info(f"[{config.cert_name}] already exists in [{config.cert_dir}]")

        if config.recreate_cert:
            self.print_info("Cert bundle already exists but certificate recreate set to [true]")
            return self.create_cert_bundle(config)

        response = self.input("Recreate Certificate Bundle? (y/N) ")
        if response.strip().lower() == 'y':
            return self.create_cert_bundle(config)

        self.print_info("Keeping existing cert bundle")
        return True

    def run_version_command(self, spec):
        """Log the tool's own version report; never acted upon."""
        try:
            result = subprocess.run(
                [shutil.which(spec.command) or spec.command, '--version'],
                capture_output=True, text=True
            )
            output = (result.stdout or result.stderr or '').strip()
            self.print_debug(f"[{spec.name}] {output}")
        except OSError as e:
            self.print_debug(f"[{spec.name}] version check failed: {e}")

    def run_post_command(self, spec, bundle_path):
        argv = spec.render_post_command(bundle_path)
        display = ' '.join(argv)
        if self.dry_run:
            self.print_action(f"[{spec.name}] Would run post command: [{display}]")
            return

        self.print_info(f"[{spec.name}] Running post command: [{display}]")
        executable = shutil.which(argv[0])
        if executable:
            argv = [executable] + argv[1:]

        try:
            result = subprocess.run(argv, capture_output=True, text=True)
        except OSError as e:
            self.print_warn(f"[{spec.name}] post command could not start: {e}")
            return

        output = (result.stdout or '').strip()
        if output:
            self.print_info(f"[{spec.name}] {output}")
        if result.returncode != 0:
            self.print_warn(f"[{spec.name}] post command exited with status {result.returncode}")
            if result.stderr and result.stderr.strip():
                self.print_warn(f"[{spec.name}] {result.stderr.strip()}")

    def configure_tool(self, spec, bundle_path):
        """Detect one tool and point it at the bundle."""
        self.print_info(f"[{spec.name}] checking if tool is installed")
        if not spec.is_installed():
            self.print_info(f"[{spec.name}] is not installed")
            return

        self.print_info(f"[{spec.name}] tool is installed")
        if self.is_debug_mode():
            self.run_version_command(spec)

        if spec.env_var:
            store = self.get_env_store()
            if spec.is_configured(store, bundle_path):
                self.print_info(f"[{spec.name}] already configured, skipping ..")
            elif self.dry_run:
                self.print_action(f"[{spec.name}] Would set {spec.env_var}=\"{bundle_path}\" in {store.location}")
            else:
                self.print_info(f"[{spec.name}] Configuring tool")
                if store.write(spec.env_var, bundle_path):
                    self.env_modified = True
                    self.print_info(f"[{spec.name}] {spec.env_var} set in {store.location}")

        if spec.post_command:
            self.run_post_command(spec, bundle_path)

    def configure_tools(self, config):
        for tool_key, spec in self.tools_registry.items():
            if self.should_process_tool(tool_key):
                self.configure_tool(spec, config.bundle_path)

    def storage_explorer_cert_dir(self):
        if platform.system() == 'Darwin':
            return os.path.expanduser("~/Library/Application Support/StorageExplorer/certs")
        return os.path.expanduser("~/.config/StorageExplorer/certs")

    def setup_storage_explorer(self, config):
        """Copy the bundle into Azure Storage Explorer's certificate directory."""
        cert_dir = self.storage_explorer_cert_dir()
        if not os.path.isdir(cert_dir):
            self.print_info("Azure Storage Explorer is not installed")
            return

        self.print_info("Azure Storage Explorer is installed")
        if self.dry_run:
            self.print_action(f"Would copy {config.bundle_path} to {cert_dir}")
            return

        shutil.copy(config.bundle_path, cert_dir)
        self.print_info(f"Azure Storage Explorer configured: copied bundle to [{cert_dir}]")

    def print_reload_hint(self):
        store = self.get_env_store()
        self.print_warn("Shell configuration was modified.")
        self.print_warn("Changes apply to new shell sessions. To load them now run:")
        self.print_info(f"  source {store.location}")

    def print_banner(self, title):
        print("################################################################")
        print(f" {title} ({self.timestamp()}) ")
        print("################################################################")
        print()

    def run(self, presets):
        self.print_banner(f"Starting a new Netskope SSL Cert instance ({self.platform_label})")

        if self.selected_tools:
            invalid_tools = self.validate_selected_tools()
            if invalid_tools:
                self.print_error(f"Invalid tool selection: {', '.join(invalid_tools)}")
                self.print_info("Use --list-tools to see available tools and their tags")
                return EXIT_FAILURE

        self.print_debug(f"nscert version: {__version__}")
        self.print_debug(f"Running on: {platform.platform()}")
        self.print_debug(f"Python version: {sys.version}")

        self.print_info("Getting shell configuration")
        self.get_env_store()

        config = self.resolve_config(presets)
        self.print_parameters(config)

        if not self.check_tenant_reachable(config):
            return EXIT_FAILURE

        if not self.ensure_cert_bundle(config):
            self.print_error("Failed to create cert bundle. Exiting.")
            return EXIT_FAILURE

        self.configure_tools(config)
        self.setup_storage_explorer(config)

        if self.env_modified:
            self.print_reload_hint()

        print()
        self.print_info(f"Certificate bundle location: {config.bundle_path}")
        self.print_banner("Netskope SSL Cert instance finished successfully")
        return EXIT_OK

    def main(self, presets):
        """Main function."""
        try:
            return self.run(presets)
        except (KeyboardInterrupt, EOFError):
            print("\nInterrupted by user")
            return EXIT_INTERRUPTED
        except Exception as e:
            self.print_error(f"Unexpected error: {e}")
            if self.is_debug_mode():
                import traceback
                traceback.print_exc()
            return EXIT_FAILURE


def build_parser(description, default_cert_dir, prog_example):
    parser = argparse.ArgumentParser(
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {prog_example}                                         # Prompt for tenant and org key
  {prog_example} --tenant acme.goskope.com --org-key XYZ  # Non-interactive run
  {prog_example} --tools git,node --dry-run               # Preview Git and NodeJS changes
  {prog_example} --list-tools                             # Show available tools

Presets may also come from {', '.join(PRESET_ENV_VARS.values())}.
Version: {__version__} | Default bundle directory: {default_cert_dir}
        """,
    )

    params_group = parser.add_argument_group("Parameters")
    params_group.add_argument('--tenant', dest='tenant_name', metavar='HOST',
                              help='Full tenant name, e.g. mytenant.eu.goskope.com')
    params_group.add_argument('--org-key', dest='org_key', metavar='KEY',
                              help='Tenant organization key')
    params_group.add_argument('--cert-name', dest='cert_name', metavar='NAME',
                              help=f'Bundle file name (default: {DEFAULT_CERT_NAME})')
    params_group.add_argument('--cert-dir', dest='cert_dir', metavar='DIR',
                              help=f'Bundle directory (default: {default_cert_dir})')
    params_group.add_argument('--recreate', dest='recreate_cert', action='store_true',
                              help='Recreate the bundle without asking when it already exists')
    params_group.add_argument('--tenant-bundle', dest='tenant_bundle', action='store_true',
                              help=f'Also write the tenant certificates alone to {TENANT_BUNDLE_NAME}')

    tool_group = parser.add_argument_group("Tool Selection")
    tool_group.add_argument('--tools', '--tool', action='append', dest='tools', metavar='TOOL',
                            help='Configure only these tools (names or tags, repeatable, comma separated)')
    tool_group.add_argument('--list-tools', action='store_true',
                            help='List all available tools and their tags, then exit')

    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument('--dry-run', action='store_true',
                              help='Show what would change without downloading or writing anything')
    output_group.add_argument('--debug', '--verbose', action='store_true',
                              help='Show detailed debug information and tool versions')
    output_group.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser


def parse_selected_tools(tool_args):
    selected_tools = []
    for tool_arg in tool_args or []:
        selected_tools.extend([t.strip() for t in tool_arg.split(',') if t.strip()])
    return selected_tools


def list_tools(registry):
    print("Available tools:")
    for tool_key, spec in registry.items():
        tags_str = ', '.join(spec.tags)
        variable = spec.env_var or '-'
        print(f"  {tool_key:<9} - {spec.name:<30} {variable:<20} Tags: {tags_str}")


def main():
    parser = build_parser(__description__, DEFAULT_CERT_DIR, "./nscert.py")
    args = parser.parse_args()

    if args.list_tools:
        list_tools(TOOLS_REGISTRY)
        sys.exit(EXIT_OK)

    presets = load_presets(args)
    presets['tenant_bundle'] = args.tenant_bundle

    tool = NetskopeCertTool(
        debug=args.debug,
        dry_run=args.dry_run,
        selected_tools=parse_selected_tools(args.tools),
    )
    sys.exit(tool.main(presets))


if __name__ == '__main__':
    main()
