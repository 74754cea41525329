"""Deployment helpers: surge lookup, the login check and default domains."""

import logging
import os
import shutil
import subprocess
import sys
from dataclasses import dataclass

from haxai.engine.grammar import DEPLOY_CLI, whoami_argv

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN_SUFFIX = "surge.sh"
PROBE_TIMEOUT = 20  # seconds


# ======================================================================
# Tool lookup
# ======================================================================

def _find_surge() -> str:
    """Resolve the ``surge`` executable path.

    Tries ``shutil.which`` first, then the ``node_modules/.bin`` next to
    the current directory (a local npm install), then the bare name.
    """
    found = shutil.which(DEPLOY_CLI)
    if found:
        return found

    candidate = os.path.join(os.getcwd(), "node_modules", ".bin", DEPLOY_CLI)
    if os.path.isfile(candidate):
        return candidate
    if sys.platform == "win32" and os.path.isfile(candidate + ".cmd"):
        return candidate + ".cmd"

    return DEPLOY_CLI


# ======================================================================
# Authentication check
# ======================================================================

@dataclass(frozen=True)
class AuthStatus:
    authenticated: bool
    account: str = ""
    detail: str = ""


def check_surge_login() -> AuthStatus:
    """Ask the deployment tool which account is logged in.

    Never raises: a missing tool, a timeout, or a non-zero exit all
    count as not authenticated.
    """
    argv = whoami_argv()
    argv[0] = _find_surge()
    try:
        result = subprocess.run(
            argv,
            capture_output=True, text=True, check=False, timeout=PROBE_TIMEOUT,
        )
    except FileNotFoundError:
        return AuthStatus(False, detail=f"'{DEPLOY_CLI}' is not installed.")
    except subprocess.TimeoutExpired:
        return AuthStatus(False, detail=f"'{DEPLOY_CLI} whoami' timed out.")

    account = (result.stdout or "").strip()
    if result.returncode != 0 or not account or "not authenticated" in account.lower():
        detail = (result.stderr or account or "").strip()
        logger.debug("surge whoami failed (rc=%s): %s", result.returncode, detail)
        return AuthStatus(False, detail=detail)
    return AuthStatus(True, account=account.splitlines()[-1].strip())


# ======================================================================
# Domains
# ======================================================================

def default_domain(site: str, now_ms: int, suffix: str = DEFAULT_DOMAIN_SUFFIX) -> str:
    """``<site>-<timestamp>.<suffix>``, lower-cased and DNS-safe."""
    label = "".join(c if c.isalnum() or c == "-" else "-" for c in site.lower()).strip("-") or "site"
    return f"{label}-{now_ms}.{suffix}"


SETUP_INSTRUCTIONS = (
    "Publishing needs a logged-in surge account.\n"
    "  1. Install the deployment tool:  npm install --global surge\n"
    "  2. Log in or create an account:  surge login\n"
    "  3. Check it worked:               surge whoami\n"
    "Then ask me to publish your site again."
)
