"""``hax-ai`` entry point."""

import sys

from knack import CLI

from haxai import COMMAND_LOADER_CLS, __version__

CLI_NAME = "hax-ai"


class HaxAICLI(CLI):
    def get_cli_version(self):
        return __version__


def get_cli() -> CLI:
    from haxai.config import default_config_dir

    return HaxAICLI(
        cli_name=CLI_NAME,
        config_dir=str(default_config_dir()),
        config_env_var_prefix="HAX_AI",
        commands_loader_cls=COMMAND_LOADER_CLS,
    )


def main(args=None) -> int:
    return get_cli().invoke(sys.argv[1:] if args is None else args)


if __name__ == "__main__":
    sys.exit(main())
