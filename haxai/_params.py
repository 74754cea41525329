"""CLI parameter definitions for hax-ai."""

from knack.arguments import ArgumentsContext

from haxai.ai.factory import ALLOWED_PROVIDERS


def load_arguments(self, _):
    """Register CLI parameters for all commands."""

    # --- requests ---
    for scope in ("ask", "classify"):
        with ArgumentsContext(self, scope) as c:
            c.argument(
                "message",
                options_list=["--message", "-m"],
                help="What you want to do, in plain words (e.g. \"Add a page called About\").",
            )

    for scope in ("ask", "chat", "resources"):
        with ArgumentsContext(self, scope) as c:
            c.argument("site", options_list=["--site", "-s"], help="Site to work on. Defaults to the only site.")

    with ArgumentsContext(self, "ask") as c:
        c.argument(
            "json_output",
            options_list=["--json", "-j"],
            help="Return the Command Plan as JSON instead of formatted display.",
            action="store_true",
            default=False,
        )

    # --- hax-ai config init ---
    with ArgumentsContext(self, "config init") as c:
        c.argument(
            "provider",
            choices=sorted(ALLOWED_PROVIDERS),
            help="AI provider for generated content. Leave unset to detect it from API key variables.",
        )
        c.argument("model", help="Model name for the provider (e.g. gpt-4o-mini).")
        c.argument("api_key", help="API key, stored in hax-ai.secrets.yaml.")
        c.argument("storage_root", help="Directory that holds your sites.")
        c.argument("domain", help="Default deployment domain, ending in .surge.sh.")
        c.argument("force", help="Overwrite an existing configuration.", action="store_true", default=False)

    # --- hax-ai config get/set ---
    with ArgumentsContext(self, "config") as c:
        c.argument("key", help="Dot-separated configuration key (e.g. ai.provider).")
        c.argument("value", help="Value to set. JSON values are parsed.")

    # --- hax-ai resources add ---
    with ArgumentsContext(self, "resources add") as c:
        c.argument("url", help="Reference URL (http:// or https://).")
        c.argument("description", help="Short note on what the link covers.")
