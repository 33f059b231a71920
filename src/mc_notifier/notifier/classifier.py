"""Event pattern classifier for server log lines."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum


class EventKind(Enum):
    """Server events worth a notification."""

    SERVER_STARTING = "server_starting"
    SERVER_STARTED = "server_started"
    SERVER_STOPPING = "server_stopping"
    PLAYER_JOINED = "player_joined"
    PLAYER_LEFT = "player_left"
    ADVANCEMENT = "advancement"


@dataclass(frozen=True)
class Event:
    """Result of classifying a log line."""

    kind: EventKind
    player: str = ""
    advancement: str = ""


@dataclass(frozen=True)
class Rule:
    """A line shape mapped to the event it announces.

    Group 1 of the pattern (if any) is the player name, group 2 the
    advancement label.
    """

    kind: EventKind
    pattern: re.Pattern[str]


# Every server line starts with "[time] [thread/LEVEL]: "
_PREFIX = r"\[.*\]: "

CHAT_PATTERN = re.compile(_PREFIX + r"<(.*)> (.*)")

# Evaluation order matters: first match wins
DEFAULT_RULES: tuple[Rule, ...] = (
    Rule(EventKind.SERVER_STARTING, re.compile(_PREFIX + r"Starting minecraft server")),
    Rule(
        EventKind.SERVER_STARTED,
        re.compile(_PREFIX + r'Done \(.*\)! For help, type "help"'),
    ),
    Rule(EventKind.SERVER_STOPPING, re.compile(_PREFIX + r"Stopping server")),
    Rule(EventKind.PLAYER_JOINED, re.compile(_PREFIX + r"(.*) joined the game")),
    Rule(EventKind.PLAYER_LEFT, re.compile(_PREFIX + r"(.*) left the game")),
    Rule(
        EventKind.ADVANCEMENT,
        re.compile(_PREFIX + r"(.*) has made the advancement \[(.*)\]"),
    ),
)


def build_rules(overrides: Mapping[str, str] | None = None) -> tuple[Rule, ...]:
    """Build a rule set from the defaults with some patterns replaced.

    Args:
        overrides: Mapping of event kind value (e.g. "player_joined") to a
            regex string. Order of evaluation stays the default order.

    Returns:
        Tuple of compiled rules

    Raises:
        ValueError: Unknown event kind or invalid regex
    """
    if not overrides:
        return DEFAULT_RULES

    known = {kind.value for kind in EventKind}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown event pattern(s): {', '.join(unknown)}")

    rules = []
    for rule in DEFAULT_RULES:
        source = overrides.get(rule.kind.value)
        if source is None:
            rules.append(rule)
            continue
        try:
            rules.append(Rule(rule.kind, re.compile(source)))
        except re.error as e:
            raise ValueError(f"Invalid pattern for {rule.kind.value}: {e}") from e
    return tuple(rules)


class Classifier:
    """Maps raw log lines to events using an ordered rule set."""

    def __init__(
        self,
        rules: tuple[Rule, ...] = DEFAULT_RULES,
        chat_pattern: re.Pattern[str] = CHAT_PATTERN,
    ):
        self.rules = rules
        self.chat_pattern = chat_pattern

    def is_chat(self, line: str) -> bool:
        """Check if a line is a player chat message."""
        return self.chat_pattern.match(line) is not None

    def classify(self, line: str) -> Event | None:
        """Classify a log line.

        Chat messages are never classified, even when the chat text looks
        like a server announcement.

        Args:
            line: Raw log line without its line terminator

        Returns:
            Event if the line matches a rule, None otherwise
        """
        if self.is_chat(line):
            return None

        for rule in self.rules:
            match = rule.pattern.match(line)
            if match is None:
                continue

            groups = match.groups()
            return Event(
                kind=rule.kind,
                player=(groups[0] or "") if len(groups) > 0 else "",
                advancement=(groups[1] or "") if len(groups) > 1 else "",
            )

        return None
