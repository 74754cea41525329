"""hax-ai: natural-language Command Plans for the hax and surge CLIs."""

from knack import CLICommandsLoader

from haxai._help import helps  # noqa: F401

__version__ = "0.1.0"


class HaxAICommandsLoader(CLICommandsLoader):
    """Command loader for hax-ai."""

    def load_command_table(self, args):
        from haxai.commands import load_command_table

        load_command_table(self, args)
        return super().load_command_table(args)

    def load_arguments(self, command):
        from haxai._params import load_arguments

        load_arguments(self, command)
        super().load_arguments(command)


COMMAND_LOADER_CLS = HaxAICommandsLoader
