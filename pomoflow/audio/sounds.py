"""Alarm and ambience playback using numpy synthesis + QSoundEffect.

All sounds are generated programmatically as WAV files and cached to
disk, so subsequent launches only load them.

Alarms (played once per completed segment, ``repeat`` times in a row)
-------------------------------------------------------------------
- ``Kitchen``: rapid mechanical ring
- ``Bell``: soft bell with a long decay
- ``Bird``: two rising chirps
- ``Digital``: square-wave triple beep
- ``Wood``: hollow wood-block knocks

Ambience (looped while a pomodoro is running)
---------------------------------------------
- ``Ticking Fast``, ``Ticking Slow``: clock ticks
- ``White Noise``, ``Brown Noise``: steady noise beds
"""

from __future__ import annotations

import io
import wave
from pathlib import Path
from typing import Callable, Sequence

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "Pomoflow"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

ALARM_NAMES = ("Kitchen", "Bell", "Bird", "Digital", "Wood")
AMBIENCE_NAMES = ("Ticking Fast", "Ticking Slow", "White Noise", "Brown Noise")
NO_AMBIENCE = "None"

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int = 200,
    decay: int = 400,
    sustain_level: float = 0.7,
    release: int = 800,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.ones(length, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    d_end = min(a + decay, length)
    if decay > 0 and d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    s_end = max(length - release, d_end)
    if s_end > d_end:
        env[d_end:s_end] = sustain_level
    if release > 0 and s_end < length:
        env[s_end:] = np.linspace(sustain_level, 0.0, length - s_end)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _silence(duration_s: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * duration_s))


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  ALARM GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_kitchen() -> bytes:
    """Kitchen timer: 1.2 s of a fast-modulated 2.6 kHz ring."""
    duration = 1.2
    t = np.linspace(0, duration, int(SAMPLE_RATE * duration), endpoint=False)
    ring = np.sin(2 * np.pi * 2600.0 * t) * 0.4
    hammer = (np.sin(2 * np.pi * 18.0 * t) > 0).astype(np.float64)
    env = _make_envelope(len(ring), attack=100, decay=200, sustain_level=0.9, release=2000)
    return _to_wav_bytes(ring * hammer * env)


def _generate_bell() -> bytes:
    """Bell: A5 with overtone, slow attack, long decay."""
    duration = 1.5
    combined = _sine(880.0, duration) * 0.35 + _sine(1760.0, duration) * 0.08
    env = _make_envelope(
        len(combined),
        attack=int(SAMPLE_RATE * 0.01),
        decay=int(SAMPLE_RATE * 0.4),
        sustain_level=0.25,
        release=int(SAMPLE_RATE * 0.9),
    )
    return _to_wav_bytes(combined * env)


def _generate_bird() -> bytes:
    """Bird: two quick chirps sweeping 2→4 kHz."""
    chirp_dur = 0.12
    t = np.linspace(0, chirp_dur, int(SAMPLE_RATE * chirp_dur), endpoint=False)
    freq = np.linspace(2000.0, 4000.0, len(t))
    phase = 2 * np.pi * np.cumsum(freq) / SAMPLE_RATE
    chirp = np.sin(phase) * 0.4
    chirp *= _make_envelope(len(chirp), attack=200, decay=800, sustain_level=0.5, release=1500)
    return _to_wav_bytes(np.concatenate([chirp, _silence(0.08), chirp, _silence(0.1)]))


def _generate_digital() -> bytes:
    """Digital: three square-wave beeps at 1 kHz."""
    beep = np.sign(_sine(1000.0, 0.1)) * 0.25
    beep *= _make_envelope(len(beep), attack=40, decay=40, sustain_level=1.0, release=80)
    gap = _silence(0.08)
    return _to_wav_bytes(np.concatenate([beep, gap, beep, gap, beep, _silence(0.1)]))


def _generate_wood() -> bytes:
    """Wood block: two short, hollow knocks."""
    knock = _sine(720.0, 0.06) * 0.5 + _sine(1450.0, 0.06) * 0.15
    knock *= _make_envelope(len(knock), attack=20, decay=600, sustain_level=0.1, release=1500)
    return _to_wav_bytes(np.concatenate([knock, _silence(0.12), knock, _silence(0.1)]))


# ═══════════════════════════════════════════════════════════════════════════
#  AMBIENCE GENERATORS (seamless 2 s loops)
# ═══════════════════════════════════════════════════════════════════════════

_LOOP_SECONDS = 2.0


def _ticks(interval_s: float) -> bytes:
    loop = _silence(_LOOP_SECONDS)
    tick = _sine(3000.0, 0.008) * 0.3
    tick *= _make_envelope(len(tick), attack=10, decay=60, sustain_level=0.3, release=200)
    step = int(SAMPLE_RATE * interval_s)
    for start in range(0, len(loop) - len(tick), step):
        loop[start:start + len(tick)] += tick
    return _to_wav_bytes(loop)


def _generate_ticking_fast() -> bytes:
    return _ticks(0.5)


def _generate_ticking_slow() -> bytes:
    return _ticks(1.0)


def _generate_white_noise() -> bytes:
    rng = np.random.default_rng(7)
    return _to_wav_bytes(rng.uniform(-1.0, 1.0, int(SAMPLE_RATE * _LOOP_SECONDS)) * 0.15)


def _generate_brown_noise() -> bytes:
    rng = np.random.default_rng(11)
    walk = np.cumsum(rng.normal(0.0, 1.0, int(SAMPLE_RATE * _LOOP_SECONDS)))
    # remove drift so the loop point does not click
    walk -= np.linspace(walk[0], walk[-1], len(walk))
    peak = np.max(np.abs(walk)) or 1.0
    return _to_wav_bytes(walk / peak * 0.3)


_GENERATORS: dict[str, Callable[[], bytes]] = {
    "Kitchen": _generate_kitchen,
    "Bell": _generate_bell,
    "Bird": _generate_bird,
    "Digital": _generate_digital,
    "Wood": _generate_wood,
    "Ticking Fast": _generate_ticking_fast,
    "Ticking Slow": _generate_ticking_slow,
    "White Noise": _generate_white_noise,
    "Brown Noise": _generate_brown_noise,
}


def _file_name(name: str) -> str:
    return name.lower().replace(" ", "_") + ".wav"


# ═══════════════════════════════════════════════════════════════════════════
#  AUDIO NOTIFIER
# ═══════════════════════════════════════════════════════════════════════════


class AudioNotifier(QObject):
    """Plays completion alarms and the looping pomodoro ambience.

    Usage::

        audio = AudioNotifier(parent=self)
        audio.alarm(["Bell"], repeat=2, volume=70)
        audio.start_ambience("Ticking Slow", volume=40)
        audio.stop_ambience()
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}
        self._alarm_queue: list[str] = []
        self._alarm_playing: str | None = None
        self._ambience: str | None = None

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if not enabled:
            self._alarm_queue.clear()
            self.stop_ambience()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def ambience(self) -> str | None:
        """Name of the looping ambience, or ``None``."""
        return self._ambience

    @property
    def alarm_queue(self) -> list[str]:
        return list(self._alarm_queue)

    def alarm(self, names: Sequence[str], repeat: int = 1, volume: int = 50) -> None:
        """Play *names* in rotation, *repeat* plays in total, one after another."""
        if not self._enabled:
            return
        names = [n for n in names if n in self._effects]
        if not names:
            return
        self._alarm_queue = [names[i % len(names)] for i in range(max(1, repeat))]
        for name in set(self._alarm_queue):
            self._effects[name].setVolume(_unit(volume))
        self._play_next_alarm()

    def start_ambience(self, profile: str, volume: int = 50) -> None:
        self.stop_ambience()
        if not self._enabled or profile == NO_AMBIENCE:
            return
        effect = self._effects.get(profile)
        if effect is None or profile not in AMBIENCE_NAMES:
            return
        effect.setLoopCount(QSoundEffect.Loop.Infinite.value)
        effect.setVolume(_unit(volume))
        effect.play()
        self._ambience = profile

    def stop_ambience(self) -> None:
        if self._ambience is None:
            return
        self._effects[self._ambience].stop()
        self._ambience = None

    # ── internal ──────────────────────────────────────────────────────

    def _play_next_alarm(self) -> None:
        if not self._alarm_queue:
            self._alarm_playing = None
            return
        name = self._alarm_queue.pop(0)
        self._alarm_playing = name
        self._effects[name].play()

    def _on_playing_changed(self, name: str) -> None:
        if name != self._alarm_playing or self._effects[name].isPlaying():
            return
        self._play_next_alarm()

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / _file_name(name)
            if not path.exists():
                path.write_bytes(gen_fn())

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for name in ALARM_NAMES + AMBIENCE_NAMES:
            path = self._sounds_dir / _file_name(name)
            if not path.exists():
                continue
            effect = QSoundEffect(self)
            effect.setSource(QUrl.fromLocalFile(str(path)))
            if name in ALARM_NAMES:
                effect.playingChanged.connect(
                    lambda n=name: self._on_playing_changed(n),
                )
            self._effects[name] = effect


def _unit(volume: int) -> float:
    return max(0, min(int(volume), 100)) / 100.0
