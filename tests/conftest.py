"""Shared test fixtures for haxai tests."""

import copy
import json
from unittest.mock import MagicMock

import pytest

from haxai.ai.invoker import GenerativeInvoker
from haxai.ai.provider import AIProvider, AIResponse
from haxai.config import DEFAULT_CONFIG
from haxai.engine.context import build_context
from haxai.engine.deploy_helpers import AuthStatus
from haxai.workflows.base import WorkflowContext

FIXED_TIME = 1_700_000_012.5  # seconds; now_ms() == 1700000012500

PROVIDER_ENV_VARS = ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GITHUB_TOKEN", "SITES_DIR", "HAX_AI_HOME")


# ------------------------------------------------------------------
# Global: no provider keys or config overrides leak in from the shell
# ------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def make_ai_response(content="Mock AI response content", model="gpt-4o", usage=None):
    """Build an AIResponse with test defaults."""
    return AIResponse(
        content=content,
        model=model,
        usage=usage or {"prompt_tokens": 100, "completion_tokens": 200, "total_tokens": 300},
    )


@pytest.fixture
def mock_ai_provider():
    """A provider whose ``chat`` returns a canned response."""
    provider = MagicMock(spec=AIProvider)
    provider.provider_name = "openai"
    provider.default_model = "gpt-4o-mini"
    provider.chat.return_value = make_ai_response()
    return provider


@pytest.fixture
def sites_root(tmp_path):
    """A storage root holding one site, ``my-blog``, with three pages."""
    root = tmp_path / "sites"
    site_dir = root / "my-blog"
    pages = [
        ("item-intro", "Intro", "intro", "<p>Cells are the basic unit of life.</p><p>Every organism has them.</p>"),
        ("item-biology", "Biology", "biology", "<p>Biology studies living things.</p>"),
        ("item-houses", "Traditional Japanese Houses", "traditional-japanese-houses",
         "<p>Japanese houses use wood and paper screens.</p>"),
    ]
    items = []
    for item_id, title, slug, body in pages:
        location = f"pages/{slug}/index.html"
        page_file = site_dir / location
        page_file.parent.mkdir(parents=True)
        page_file.write_text(body, encoding="utf-8")
        items.append({
            "id": item_id, "title": title, "slug": slug, "location": location,
            "parent": None, "indent": 0,
        })
    (site_dir / "site.json").write_text(json.dumps({"items": items}, indent=2), encoding="utf-8")
    return root


@pytest.fixture
def context(sites_root):
    return build_context(["my-blog"], "my-blog", sites_root)


@pytest.fixture
def authenticated():
    return MagicMock(return_value=AuthStatus(True, account="instructor@example.edu"))


@pytest.fixture
def workflow_ctx(context, authenticated):
    """Handler context with no generative provider."""
    return WorkflowContext(
        context=context,
        invoker=GenerativeInvoker(None),
        auth_check=authenticated,
        clock=lambda: FIXED_TIME,
    )


@pytest.fixture
def generating_ctx(context, authenticated, mock_ai_provider):
    """Handler context whose provider returns ``mock_ai_provider``'s reply."""
    return WorkflowContext(
        context=context,
        invoker=GenerativeInvoker(mock_ai_provider),
        auth_check=authenticated,
        clock=lambda: FIXED_TIME,
    )


@pytest.fixture
def sample_config():
    """Return a deep copy of the default config with test values."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["ai"]["provider"] = "openai"
    config["ai"]["api_key"] = "sk-test"
    config["engine"]["history_limit"] = 6
    return config
