"""Config commands -- view and modify ``config.json``.

Provides the ``tweetkit config`` sub-command group for reading, updating,
and resetting the persisted :class:`~tweetkit.models.GlobalConfig`:
API base URLs, request timeout, cache settings, and credential sources.
"""

from __future__ import annotations

import typer

from tweetkit.commands import handle_errors
from tweetkit.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the current configuration.

    Example::

        tweetkit config show
        tweetkit --json config show
    """
    from tweetkit.config import global_config_path, load_global_config

    with handle_errors():
        config = load_global_config()
    info(f"Config file: {global_config_path()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g. 'cache.expire')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the field it replaces (bool, int,
    float, or text) and the result is validated before it is saved.

    Raises:
        typer.Exit: With code 2 for an unknown key, a value that cannot be
            coerced, or a config that fails validation.

    Example::

        tweetkit config set request.timeout 30
        tweetkit config set cache.expire "2 hours"
        tweetkit config set credentials.consumer_key file:~/.twitter/key
    """
    from pydantic import ValidationError as PydanticValidationError

    from tweetkit.config import load_global_config, save_global_config
    from tweetkit.models import GlobalConfig

    with handle_errors():
        config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object = value
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, (int, float)):
        try:
            coerced = type(current)(value)
        except ValueError:
            # cache.expire may switch from seconds back to an expression
            coerced = value
    elif current is None and value.lower() in ("none", "null", ""):
        coerced = None

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except PydanticValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    with handle_errors():
        save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the configuration to defaults."""
    from tweetkit.config import save_global_config
    from tweetkit.models import GlobalConfig

    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    with handle_errors():
        save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
