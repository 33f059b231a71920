"""CLI for mc-notifier.

Usage:
    mc-notifier watch logs/latest.log https://discord.com/api/webhooks/...
    mc-notifier test
    mc-notifier classify "[12:00:00] [Server thread/INFO]: Steve joined the game"
"""

import json
from pathlib import Path

import click

from mc_notifier.config import Config, ConfigError
from mc_notifier.logging import configure_logging, get_logger
from mc_notifier.notifier import (
    Classifier,
    DiscordClient,
    RateLimitBackoff,
    build_payload,
    build_rules,
    format_event,
    run_notifier,
)

log = get_logger(__name__)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=Path.home() / ".mc-notifier" / "config.yaml",
    help="Config file path",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Path, verbose: bool) -> None:
    """Discord notifications for Minecraft server logs."""
    try:
        config = Config.from_file(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    configure_logging("DEBUG" if verbose else config.log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command("watch")
@click.argument("log_file", required=False, type=click.Path(path_type=Path))
@click.argument("webhook_url", required=False)
@click.pass_context
def watch(ctx: click.Context, log_file: Path | None, webhook_url: str | None) -> None:
    """Tail LOG_FILE and post server events to WEBHOOK_URL.

    Only lines written after startup are reported. WEBHOOK_URL falls back to
    MC_NOTIFIER_WEBHOOK_URL or the config file.
    """
    config: Config = ctx.obj["config"]
    log_file = log_file or config.log_file
    if log_file is None:
        raise click.UsageError("Missing log file")
    webhook_url = get_webhook_url(config, webhook_url)

    try:
        run_notifier(log_file, webhook_url, config)
    except OSError as e:
        log.error("Cannot read log file", path=str(log_file), error=str(e))
        click.echo(f"Error: can't read log file {log_file}: {e.strerror or e}", err=True)
        raise SystemExit(1) from e
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@main.command("test")
@click.argument("webhook_url", required=False)
@click.pass_context
def test(ctx: click.Context, webhook_url: str | None) -> None:
    """Send a test notification to verify the webhook."""
    config: Config = ctx.obj["config"]
    client = DiscordClient(
        get_webhook_url(config, webhook_url),
        backoff=RateLimitBackoff(default_wait=config.default_retry_after),
        timeout=config.request_timeout,
    )
    try:
        sent = client.send_test()
    finally:
        client.close()

    if sent:
        click.echo("Test notification sent successfully!")
    else:
        click.echo("Failed to send test notification")
        raise SystemExit(1)


@main.command("classify")
@click.argument("line")
@click.pass_context
def classify(ctx: click.Context, line: str) -> None:
    """Show the notification a log LINE would produce, without sending it."""
    config: Config = ctx.obj["config"]
    try:
        classifier = Classifier(rules=build_rules(config.patterns))
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if classifier.is_chat(line):
        click.echo("Chat message (ignored)")
        return

    event = classifier.classify(line)
    if event is None:
        click.echo("No event")
        return

    message = format_event(event)
    click.echo(f"Event:       {event.kind.value}")
    if event.player:
        click.echo(f"Player:      {event.player}")
    if event.advancement:
        click.echo(f"Advancement: {event.advancement}")
    click.echo(f"Title:       {message.title}")
    click.echo(f"Description: {message.description}")
    click.echo(f"Severity:    {message.severity.value} ({message.color})")
    click.echo(f"Payload:     {json.dumps(build_payload(message))}")


# --- Utility Functions ---


def get_webhook_url(config: Config, webhook_url: str | None) -> str:
    """Resolve the webhook URL from the argument or config, or fail with usage."""
    url = webhook_url or config.webhook_url
    if not url:
        raise click.UsageError(
            "Missing webhook url (pass WEBHOOK_URL or set MC_NOTIFIER_WEBHOOK_URL)"
        )
    return url


if __name__ == "__main__":
    main()
