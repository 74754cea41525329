"""Command-line grammar of the external site and deployment tools.

Each helper returns a ``ShellInvocation``; nothing here formats strings.
"""

from haxai.engine.plan import ShellInvocation

SITE_CLI = "hax"
DEPLOY_CLI = "surge"
MANIFEST_FILENAME = "site.json"

# Theme keywords recognised in site-creation requests.
THEME_KEYWORDS: dict[str, str] = {
    "penn state": "polaris-flex-theme",
    "polaris": "polaris-flex-theme",
}


def site_start(name: str) -> ShellInvocation:
    return ShellInvocation((SITE_CLI, "site", "start", "--name", name, "--y"))


def site_theme(theme: str) -> ShellInvocation:
    return ShellInvocation((SITE_CLI, "site", "site:theme", "--theme", theme))


def node_add(title: str, content: str) -> ShellInvocation:
    return ShellInvocation(
        (SITE_CLI, "site", "node:add", "--title", title, "--content", content, "--y")
    )


def site_build() -> ShellInvocation:
    return ShellInvocation((SITE_CLI, "site", "build"))


def site_surge(domain: str) -> ShellInvocation:
    return ShellInvocation((SITE_CLI, "site", "site:surge", "--domain", domain, "--no-i"))


def serve(site_dir: str) -> ShellInvocation:
    return ShellInvocation((SITE_CLI, "serve", "--path", site_dir))


def import_site(name: str, url: str) -> ShellInvocation:
    return ShellInvocation(
        (
            SITE_CLI, "site", "create",
            "--name", name,
            "--import-site", url,
            "--import-structure", "haxcmsToSite",
            "--auto",
        )
    )


def show_manifest(manifest_path: str) -> ShellInvocation:
    return ShellInvocation(("cat", manifest_path))


def whoami_argv() -> list[str]:
    """Arguments of the deployment tool's authentication check."""
    return [DEPLOY_CLI, "whoami"]
