"""
Tests for the audio cue players.
"""

import io

import pytest

from shared.sounds import DEFAULT_SOUNDS, BellSoundPlayer, SoundError, SoundPlayer


class TestSoundPlayer:
    """Tests for the logging sound player."""

    def test_play_records_cue(self, sound_player: SoundPlayer):
        cue = sound_player.play("sale")

        assert cue.source == DEFAULT_SOUNDS["sale"]
        assert sound_player.played_keys() == ["sale"]

    def test_unmapped_key_still_plays(self, sound_player: SoundPlayer):
        cue = sound_player.play("fanfare")

        assert cue.source is None
        assert "no file" in str(cue)

    def test_muted_player_plays_nothing(self):
        player = SoundPlayer(muted=True)

        assert player.play("sale") is None
        assert player.played == []

    def test_simulated_failure(self):
        player = SoundPlayer(fail_rate=1.0)

        with pytest.raises(SoundError):
            player.play("error")
        assert player.played == []

    def test_custom_mapping(self):
        player = SoundPlayer(sounds={"sale": "kaching.wav"})

        assert player.resolve("sale") == "kaching.wav"
        assert player.resolve("customer") is None

    def test_clear_history(self, sound_player: SoundPlayer):
        sound_player.play("info")
        sound_player.clear_history()

        assert sound_player.played_keys() == []


class TestBellSoundPlayer:
    """Tests for the terminal bell player."""

    def test_rings_bell(self):
        stream = io.StringIO()
        player = BellSoundPlayer(stream=stream)

        player.play("sale")
        player.play("customer")

        assert stream.getvalue() == "\a\a"
        assert player.played_keys() == ["sale", "customer"]

    def test_muted_bell_is_silent(self):
        stream = io.StringIO()
        BellSoundPlayer(stream=stream, muted=True).play("sale")

        assert stream.getvalue() == ""
