"""Custom command implementations for hax-ai.

These functions are the entry points called by the knack CLI.  Each one
maps to a registered command in commands.py.  Commands print Command
Plans; they never run them.
"""

import json
import logging
from pathlib import Path

from knack.util import CLIError

logger = logging.getLogger(__name__)


# ======================================================================
# Helpers
# ======================================================================

def _load_config():
    """Load engine configuration (defaults when no file exists)."""
    from haxai.config import EngineConfig

    config = EngineConfig()
    config.load()
    return config


def _list_sites(storage_root: Path) -> list[str]:
    """Sites are the directories under *storage_root* that hold a site.json."""
    from haxai.engine.grammar import MANIFEST_FILENAME

    if not storage_root.is_dir():
        return []
    return sorted(p.name for p in storage_root.iterdir() if (p / MANIFEST_FILENAME).is_file())


def _build_context(config, site: str | None = None):
    from haxai.engine.context import build_context

    storage_root = config.storage_root()
    sites = _list_sites(storage_root)
    if site and site not in sites:
        raise CLIError(
            f"Site '{site}' was not found in {storage_root}.\n"
            f"Available sites: {', '.join(sites) or 'none'}"
        )
    return build_context(available_sites=sites, current_site=site, storage_root=storage_root)


def _build_engine(config):
    from haxai.engine.processor import IntentEngine

    return IntentEngine.from_config(config.to_dict())


def _site_context(config, site: str | None):
    """Context whose current site is *site*, or the only site there is."""
    context = _build_context(config, site)
    if not context.current_site:
        raise CLIError(
            "Which site? Pass --site.\n"
            f"Available sites: {', '.join(context.available_sites) or 'none'}"
        )
    return context


# ======================================================================
# Engine Commands
# ======================================================================

def hax_ask(message=None, site=None, json_output=False):
    """Turn one request into a Command Plan and print it."""
    from haxai.ui.console import console

    if not message:
        raise CLIError("--message is required.")

    config = _load_config()
    context = _build_context(config, site)
    engine = _build_engine(config)

    if json_output:
        return engine.process(message, context).to_dict()

    with console.spinner("Thinking"):
        plan = engine.process(message, context)
    console.print_plan(plan)
    return None


def hax_classify(message=None):
    """Show which intent a request maps to, without building a plan."""
    from haxai.engine.intents import classify

    if not message:
        raise CLIError("--message is required.")
    return {"message": message, "intent": classify(message).value}


def hax_chat(site=None):
    """Interactive loop: one plan per request, with conversation history.

    ``/clear`` forgets the conversation; ``/exit`` (or Ctrl-D) quits.
    """
    from haxai.ui.console import ChatPrompt, console

    config = _load_config()
    engine = _build_engine(config)
    prompt = ChatPrompt(console)

    console.print_info(
        "Describe what you want to build. "
        + ("Generative answers are on." if engine.invoker.available else "Running without an AI provider.")
    )

    turns = 0
    while True:
        message = prompt.prompt()
        if message is None or message.lower() in ("/exit", "/quit", "exit", "quit"):
            break
        if not message:
            continue
        if message.lower() == "/clear":
            engine.clear_history()
            console.print_success("Conversation cleared")
            continue

        # Re-read the sites each turn; a previous plan may have created one.
        context = _build_context(config, site)
        with console.spinner("Thinking"):
            plan = engine.process(message, context)
        console.print_plan(plan)
        turns += 1

    return {"status": "ended", "turns": turns}


# ======================================================================
# Config Commands
# ======================================================================

def hax_config_init(provider=None, model=None, api_key=None, storage_root=None, domain=None, force=False):
    """Create hax-ai.yaml from defaults plus the given values."""
    from haxai.config import EngineConfig
    from haxai.ui.console import console

    config = EngineConfig()
    if config.exists() and not force:
        raise CLIError(
            f"{config.config_path} already exists.\n"
            "Use --force to overwrite it, or 'hax-ai config set' to change one value."
        )

    overrides: dict = {"ai": {}, "sites": {}, "deploy": {}}
    if provider:
        overrides["ai"]["provider"] = provider
    if model:
        overrides["ai"]["model"] = model
    if api_key:
        overrides["ai"]["api_key"] = api_key
    if storage_root:
        overrides["sites"]["storage_root"] = str(Path(storage_root).expanduser().resolve())
    if domain:
        overrides["deploy"]["domain"] = domain

    config.create_default(overrides)

    console.print_success(f"Configuration saved to {config.config_path}")
    result: dict = {"status": "created", "file": str(config.config_path)}
    if config.secrets_path.exists():
        result["secrets_file"] = str(config.secrets_path)
    return result


def hax_config_show():
    """Display current configuration.

    Secret values stored in ``hax-ai.secrets.yaml`` are masked as ``***``.
    """
    from haxai.config import SECRET_KEY_PREFIXES

    config = _load_config()
    result = config.to_dict()

    for prefix in SECRET_KEY_PREFIXES:
        parts = prefix.split(".")
        node = result
        for part in parts[:-1]:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                break
        else:
            leaf = parts[-1]
            if isinstance(node, dict) and node.get(leaf):
                node[leaf] = "***"

    result["sites"]["resolved_storage_root"] = str(config.storage_root())
    return result


def hax_config_get(key=None):
    """Get a single configuration value by dot-separated key."""
    from haxai.config import EngineConfig

    if not key:
        raise CLIError("--key is required.")

    config = _load_config()
    value = config.get(key)
    if value is None:
        raise CLIError(f"Key '{key}' not found in configuration.")

    if EngineConfig._is_secret_key(key) and value:
        return {"key": key, "value": "***"}

    return {"key": key, "value": value}


def hax_config_set(key=None, value=None):
    """Set a configuration value."""
    from haxai.config import EngineConfig

    if not key:
        raise CLIError("--key is required.")
    if value is None:
        raise CLIError("--value is required.")

    config = _load_config()

    # Try to parse value as JSON for structured values
    try:
        config.set(key, json.loads(value))
    except (json.JSONDecodeError, TypeError):
        config.set(key, value)

    shown = "***" if EngineConfig._is_secret_key(key) else config.get(key)
    return {"key": key, "value": shown, "status": "updated"}


# ======================================================================
# Resource Commands
# ======================================================================

def hax_resources_show(site=None):
    """Show the course materials that would ground generated content."""
    from haxai.engine.resources import ResourceLimits, summarize

    config = _load_config()
    context = _site_context(config, site)
    site = context.current_site
    summary = summarize(site, context, ResourceLimits.from_config(config.to_dict()))
    return {
        "site": site,
        "urls": summary.urls,
        "notes": summary.notes,
        "documents": [{"source": s.source, "characters": len(s.text)} for s in summary.snippets],
    }


def hax_resources_add(url=None, site=None, description=""):
    """Add a reference URL to a site's course materials."""
    from haxai.engine.resources import add_url_resource
    from haxai.ui.console import console

    if not url:
        raise CLIError("--url is required.")
    if not url.startswith(("http://", "https://")):
        raise CLIError(f"'{url}' is not a web address. URLs must start with http:// or https://.")

    config = _load_config()
    context = _site_context(config, site)
    site = context.current_site
    entry = add_url_resource(context.site_dir(site), url, description or "")
    console.print_success(f"Added {url} to {site}")
    return {"site": site, **entry}
