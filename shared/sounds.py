"""
Audio cue players for console notifications.

The console rings a short sound when a notification arrives: a cash register
for a new sale, a chime for a new customer, a generic tone per category for
everything else. The players here log the cue instead of decoding audio; a
desktop shell would plug in a player that actually plays the mapped file.

Design decisions:
- All cues are logged for visibility
- Players track played cues for test assertions
- Failures can be simulated for testing the queue's error isolation
"""

import logging
import random
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, TextIO

from shared.models import utcnow

logger = logging.getLogger("sounds")


# Default cue files, keyed by sound key or notification category
DEFAULT_SOUNDS: dict[str, str] = {
    "sale": "sounds/cash-register.mp3",
    "customer": "sounds/new-customer.mp3",
    "success": "sounds/success.mp3",
    "error": "sounds/error.mp3",
    "info": "sounds/info.mp3",
    "warning": "sounds/warning.mp3",
}


class SoundError(Exception):
    """A cue could not be played."""


@dataclass
class PlayedCue:
    """Record of a cue played by a player."""
    key: str
    source: Optional[str]
    timestamp: datetime = field(default_factory=utcnow)

    def __str__(self) -> str:
        return f"♪ {self.key} ({self.source or 'no file'})"


class SoundPlayer:
    """
    Logging sound player.

    Resolves a cue key to a file and records it. Unknown keys are still
    recorded, with no file, so a missing mapping never silences a toast.
    """

    def __init__(
        self,
        sounds: Optional[dict[str, str]] = None,
        muted: bool = False,
        fail_rate: float = 0.0,
    ):
        """
        Initialize the player.

        Args:
            sounds: Cue key to file mapping (defaults to DEFAULT_SOUNDS)
            muted: When True, cues are neither played nor recorded
            fail_rate: Probability of a playback failure (0.0 to 1.0), for testing
        """
        self.sounds = dict(DEFAULT_SOUNDS if sounds is None else sounds)
        self.muted = muted
        self.fail_rate = fail_rate
        self.played: list[PlayedCue] = []

    def resolve(self, key: str) -> Optional[str]:
        return self.sounds.get(key)

    def play(self, key: str) -> Optional[PlayedCue]:
        """
        Play the cue for a key.

        Returns:
            The played cue, or None when muted.

        Raises:
            SoundError: On a simulated playback failure.
        """
        if self.muted:
            return None

        if random.random() < self.fail_rate:
            logger.error(f"[SOUND FAILED] {key}")
            raise SoundError(f"Simulated playback failure for '{key}'")

        cue = PlayedCue(key=key, source=self.resolve(key))
        self._output(cue)
        self.played.append(cue)
        return cue

    def _output(self, cue: PlayedCue) -> None:
        logger.info(f"[SOUND] {cue.key} -> {cue.source or '(unmapped)'}")

    def played_keys(self) -> list[str]:
        """Keys of all cues played so far (for testing)."""
        return [c.key for c in self.played]

    def clear_history(self):
        """Clear played cue history (useful between tests)."""
        self.played.clear()


class BellSoundPlayer(SoundPlayer):
    """Rings the terminal bell for every cue; used by the CLI watch mode."""

    def __init__(self, stream: Optional[TextIO] = None, **kwargs):
        super().__init__(**kwargs)
        self.stream = stream or sys.stdout

    def _output(self, cue: PlayedCue) -> None:
        super()._output(cue)
        self.stream.write("\a")
        self.stream.flush()
