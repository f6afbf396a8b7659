"""
Centralized mock data for nscert tests.

This module contains all mock responses and test data used across the test suite.
"""

TENANT_NAME = "acme.goskope.com"
ORG_KEY = "XYZ"

LOGIN_URL = f"https://{TENANT_NAME}/locallogin"
CA_CERT_URL = f"https://addon-{TENANT_NAME}/config/ca/cert?orgkey={ORG_KEY}"
ORG_CERT_URL = f"https://addon-{TENANT_NAME}/config/org/cert?orgkey={ORG_KEY}"
MOZILLA_ROOTS_URL = (
    "https://ccadb-public.secure.force.com/mozilla/IncludedRootsPEMTxt"
    "?TrustBitsInclude=Websites"
)

# Certificate mock data
TENANT_CA_CERT = b"""-----BEGIN CERTIFICATE-----
MIIDqDCCApCgAwIBAgIJAKZ7ACMEROOTQ0FNA0GCSqGSIb3DQEBCwUAMIGBMQswCQYD
VQQGEwJVUzETMBEGA1UECAwKQ2FsaWZvcm5pYTEWMBQGA1UEBwwNU2FudGEgQ2xh
-----END CERTIFICATE-----
"""

TENANT_ORG_CERT = b"""-----BEGIN CERTIFICATE-----
MIIDvTCCAqWgAwIBAgIJAKZ7ACMEORGQ0FNA0GCSqGSIb3DQEBCwUAMIGBMQswCQYD
VQQGEwJVUzETMBEGA1UECAwKQ2FsaWZvcm5pYTEWMBQGA1UEBwwNU2FudGEgQ2xh
-----END CERTIFICATE-----
"""

# Mozilla list has no trailing newline; concatenation must keep it byte for byte
MOZILLA_ROOTS = b"""-----BEGIN CERTIFICATE-----
MIIDSjCCAjKgAwIBAgIQRK+wgNajJ7qJMDmGLvhAazANBgkqhkiG9w0BAQUFADA/
MSQwIgYDVQQKExtEaWdpdGFsIFNpZ25hdHVyZSBUcnVzdCBDby4xFzAVBgNVBAMT
-----END CERTIFICATE-----
-----BEGIN CERTIFICATE-----
MIIFazCCA1OgAwIBAgIRAIIQz7DSQONZRGPgu2OCiwAwDQYJKoZIhvcNAQELBQAw
TzELMAkGA1UEBhMCVVMxKTAnBgNVBAoTIEludGVybmV0IFNlY3VyaXR5IFJlc2Vh
-----END CERTIFICATE-----"""

DEFAULT_RESPONSES = {
    CA_CERT_URL: TENANT_CA_CERT,
    ORG_CERT_URL: TENANT_ORG_CERT,
    MOZILLA_ROOTS_URL: MOZILLA_ROOTS,
}

EXPECTED_BUNDLE = TENANT_CA_CERT + TENANT_ORG_CERT + MOZILLA_ROOTS
EXPECTED_TENANT_BUNDLE = TENANT_CA_CERT + TENANT_ORG_CERT

OLD_BUNDLE = b"-----BEGIN CERTIFICATE-----\nOLDBUNDLE\n-----END CERTIFICATE-----\n"

# Tool command outputs
GIT_VERSION = "git version 2.43.0"
NODE_VERSION = "v18.17.0"
NPM_CONFIG_FAILURE = "npm ERR! code EACCES"

# Tool binary paths
TOOL_PATHS = {
    'git': '/usr/bin/git',
    'openssl': '/usr/bin/openssl',
    'curl': '/usr/bin/curl',
    'python3': '/usr/bin/python3',
    'aws': '/usr/local/bin/aws',
    'gcloud': '/usr/local/bin/gcloud',
    'npm': '/usr/local/bin/npm',
    'node': '/usr/local/bin/node',
    'ruby': '/usr/bin/ruby',
    'composer': '/usr/local/bin/composer',
    'go': '/usr/local/go/bin/go',
    'az': '/usr/local/bin/az',
    'pip3': '/usr/bin/pip3',
    'oci': '/usr/local/bin/oci',
    'cargo': '/Users/test/.cargo/bin/cargo',
    'yarnpkg': '/usr/local/bin/yarnpkg',
}

# Shell detection outputs
SHELL_BASH = "/bin/bash"
SHELL_ZSH = "/bin/zsh"
SHELL_FISH = "/usr/local/bin/fish"

# Home directory paths
HOME_DIR = "/Users/test"
