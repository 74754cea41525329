"""Command table registration for hax-ai."""

from knack.commands import CommandGroup

CUSTOM_OPERATIONS = "haxai.custom#{}"


def load_command_table(self, _):
    """Register all hax-ai commands."""

    with CommandGroup(self, "", CUSTOM_OPERATIONS) as g:
        g.command("ask", "hax_ask")
        g.command("classify", "hax_classify")
        g.command("chat", "hax_chat")

    with CommandGroup(self, "config", CUSTOM_OPERATIONS) as g:
        g.command("init", "hax_config_init")
        g.command("show", "hax_config_show")
        g.command("get", "hax_config_get")
        g.command("set", "hax_config_set")

    with CommandGroup(self, "resources", CUSTOM_OPERATIONS) as g:
        g.command("show", "hax_resources_show")
        g.command("add", "hax_resources_add")
