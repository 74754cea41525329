"""Intent engine: classify a request and turn it into a Command Plan.

``IntentEngine.process`` is the single entry point.  It never raises:
recoverable handler errors become failed plans carrying an error code,
and anything unexpected becomes an ``internal-error`` plan.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from knack.util import CLIError

from haxai.ai.invoker import GenerativeInvoker
from haxai.engine.context import Context
from haxai.engine.deploy_helpers import DEFAULT_DOMAIN_SUFFIX, AuthStatus, check_surge_login
from haxai.engine.history import DEFAULT_HISTORY_LIMIT, ConversationHistory
from haxai.engine.intents import Intent, classify
from haxai.engine.plan import CommandPlan, ShellCommand
from haxai.engine.resources import ResourceLimits
from haxai.errors import HaxAIError, ProviderError
from haxai.parsers.response_parser import parse_ai_response
from haxai.workflows import HANDLERS, WorkflowContext, default_response

logger = logging.getLogger(__name__)

DEFAULT_SESSION = "default"

SYSTEM_PROMPT = """\
You are a helpful assistant for building HAX websites on the user's computer. \
Convert the user's request into commands for the hax and surge command-line tools \
and explain what they do in simple, encouraging terms. The user is not technical.

CONTEXT:
- Sites directory: {storage_root}
- Available sites: {sites}
- Current site: {current_site}

COMMANDS (run from the site's directory unless noted):
1. Create a site (run from the sites directory): hax site start --name NAME --y
2. Add a page: hax site node:add --title 'TITLE' --content '<p>HTML</p>' --y
3. Preview: hax serve --path 'SITE_DIRECTORY'
4. Build: hax site build
5. Publish: hax site site:surge --domain NAME.surge.sh --no-i
6. Show pages: cat 'SITE_DIRECTORY/site.json'

RESPONSE FORMAT:
Answer with a JSON object and nothing else:
{{"explanation": "what you will do", "commands": ["command", "..."]}}
Use single quotes around arguments that contain spaces. If you need more \
information, ask for it in the explanation and return an empty command list.
"""


class IntentEngine:
    """Turns natural-language requests into Command Plans.

    Holds one bounded conversation history per session id.  Calls are
    expected to be serialized; nothing here is locked.
    """

    def __init__(
        self,
        invoker: GenerativeInvoker | None = None,
        limits: ResourceLimits | None = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        auth_check: Callable[[], AuthStatus] = check_surge_login,
        clock: Callable[[], float] = time.time,
        default_domain: str = "",
        domain_suffix: str = DEFAULT_DOMAIN_SUFFIX,
    ):
        self.invoker = invoker or GenerativeInvoker()
        self.limits = limits or ResourceLimits()
        self.history_limit = history_limit
        self.auth_check = auth_check
        self.clock = clock
        self.default_domain = default_domain
        self.domain_suffix = domain_suffix
        self._histories: dict[str, ConversationHistory] = {}

    @classmethod
    def from_config(cls, config: dict[str, Any], **kwargs) -> "IntentEngine":
        """Build an engine from an engine configuration dict.

        A missing or broken provider setup is not fatal: the engine
        then answers from its deterministic rules only.
        """
        from haxai.ai.factory import create_ai_provider

        provider = None
        try:
            provider = create_ai_provider(config)
        except CLIError as e:
            logger.warning("Generative fallback disabled: %s", str(e).splitlines()[0])

        ai_config = config.get("ai", {}) or {}
        engine_config = config.get("engine", {}) or {}
        deploy_config = config.get("deploy", {}) or {}
        invoker = GenerativeInvoker(
            provider,
            temperature=float(ai_config.get("temperature", 0.7)),
            max_tokens=int(ai_config.get("max_tokens", 800)),
        )
        return cls(
            invoker=invoker,
            limits=ResourceLimits.from_config(config),
            history_limit=int(engine_config.get("history_limit", DEFAULT_HISTORY_LIMIT)),
            default_domain=str(deploy_config.get("domain") or ""),
            **kwargs,
        )

    # ------------------------------------------------------------------ #
    #  History                                                            #
    # ------------------------------------------------------------------ #

    def history(self, session_id: str = DEFAULT_SESSION) -> ConversationHistory:
        if session_id not in self._histories:
            self._histories[session_id] = ConversationHistory(self.history_limit)
        return self._histories[session_id]

    def clear_history(self, session_id: str | None = None):
        """Forget one session's turns, or every session's when ``None``."""
        if session_id is None:
            self._histories.clear()
        else:
            self._histories.pop(session_id, None)
        logger.debug("Cleared conversation history (%s)", session_id or "all sessions")

    def status(self) -> dict[str, Any]:
        return {
            "provider": self.invoker.provider_name,
            "generativeAvailable": self.invoker.available,
            "sessions": {sid: len(h) for sid, h in self._histories.items()},
            "historyLimit": self.history_limit,
        }

    # ------------------------------------------------------------------ #
    #  Processing                                                         #
    # ------------------------------------------------------------------ #

    def process(self, text: str, context: Context, session_id: str = DEFAULT_SESSION) -> CommandPlan:
        """Return the Command Plan for *text*.  Never raises."""
        intent = classify(text)
        logger.debug("Classified %r as %s", text, intent.value)
        try:
            plan = self._dispatch(intent, text, context, session_id)
        except Exception as e:  # noqa: BLE001
            logger.error("Unexpected failure while handling %s: %s", intent.value, e, exc_info=True)
            plan = CommandPlan.failure(
                f"Sorry, something went wrong: {e}",
                error="internal-error",
                action=intent.value,
            )
        self.history(session_id).record_exchange(text, plan.explanation)
        return plan

    def _workflow_context(self, context: Context) -> WorkflowContext:
        return WorkflowContext(
            context=context,
            invoker=self.invoker,
            limits=self.limits,
            auth_check=self.auth_check,
            clock=self.clock,
            default_domain=self.default_domain,
            domain_suffix=self.domain_suffix,
        )

    def _dispatch(self, intent: Intent, text: str, context: Context, session_id: str) -> CommandPlan:
        ctx = self._workflow_context(context)
        if intent is Intent.UNKNOWN:
            return self._generative_fallback(text, ctx, session_id)

        handler = HANDLERS[intent]
        try:
            return handler(text, ctx)
        except HaxAIError as e:
            logger.debug("%s failed with %s: %s", intent.value, e.code, e)
            return CommandPlan.failure(str(e), error=e.code, action=intent.value, examples=e.suggestions)
        except OSError as e:
            logger.warning("%s failed reading site files: %s", intent.value, e)
            return CommandPlan.failure(
                f"Sorry, I couldn't read the site files: {e}", error="file-error", action=intent.value
            )
        except ValueError as e:
            logger.warning("%s failed on invalid data: %s", intent.value, e)
            return CommandPlan.failure(
                f"Sorry, I couldn't complete that: {e}", error="invalid-data", action=intent.value
            )

    def _generative_fallback(self, text: str, ctx: WorkflowContext, session_id: str) -> CommandPlan:
        if not self.invoker.available:
            return default_response(text, ctx)

        context = ctx.context
        system = SYSTEM_PROMPT.format(
            storage_root=context.storage_root,
            sites=", ".join(context.available_sites) or "none",
            current_site=context.current_site or "none selected",
        )
        grounding = ctx.grounding_text(context.current_site)
        if grounding:
            system += f"\nCOURSE MATERIALS:\n{grounding}\n"

        try:
            reply = self.invoker.complete(system, self.history(session_id).as_messages(), text)
        except ProviderError as e:
            logger.warning("Generative fallback failed: %s", e)
            return default_response(text, ctx)

        parsed = parse_ai_response(reply)
        logger.debug("Parsed generated reply via %s: %d command(s)", parsed.method, len(parsed.commands))
        metadata: dict[str, Any] = {"aiGenerated": True, "parseMethod": parsed.method}
        if context.current_site:
            metadata.update(ctx.site_metadata(context.current_site))
        return CommandPlan(
            explanation=parsed.explanation or "Here is what I suggest.",
            steps=[ShellCommand(c) for c in parsed.commands],
            action="ai-response",
            metadata=metadata,
        )
