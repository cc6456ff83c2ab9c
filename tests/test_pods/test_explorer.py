"""Tests for the Chord Explorer Pod."""

import base64
import io
import logging

import numpy as np
import pytest
import soundfile as sf
from fastapi.testclient import TestClient

from fxcore.config import get_settings
from pods.explorer import cli as cli_module
from pods.explorer.config import Config
from pods.explorer.cli import main as cli_main
from pods.explorer.main import app
from pods.explorer.synth import Biquad, KarplusStrongSynth, ResonanceChain
from fxtheory.tuning import Fretting


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


class TestKarplusStrong:
    """String model."""

    def test_delay_length(self):
        synth = KarplusStrongSynth(sample_rate=44100)
        assert synth.delay_length(440.0) == 100
        assert synth.delay_length(110.0) == 401

    def test_invalid_frequency(self):
        """Test non-positive and above-Nyquist frequencies are rejected."""
        synth = KarplusStrongSynth()
        with pytest.raises(ValueError):
            synth.delay_length(0)
        with pytest.raises(ValueError):
            synth.delay_length(-10.0)
        with pytest.raises(ValueError):
            synth.delay_length(30000.0)

    def test_damping(self):
        """Test higher strings get a larger coefficient, capped at 330 Hz."""
        assert KarplusStrongSynth.damping(330.0) == pytest.approx(0.998)
        assert KarplusStrongSynth.damping(660.0) == pytest.approx(0.998)
        assert KarplusStrongSynth.damping(110.0) == pytest.approx(0.994 + 0.004 / 3)

    def test_excitation_pick_comb(self):
        """Test each cell averages with the one a fifth of the line ahead."""
        synth = KarplusStrongSynth(seed=7)
        noise = np.random.RandomState(7).uniform(-1.0, 1.0, 100)
        expected = (noise + np.roll(noise, -20)) / 2
        assert np.allclose(synth.excitation(100), expected)

    def test_buffer_length(self):
        """Test output is exactly sample_rate * duration samples."""
        synth = KarplusStrongSynth(sample_rate=8000, duration=0.25, seed=1)
        assert len(synth.render_raw(220.0)) == 2000
        assert len(synth.render(220.0)) == 2000

    def test_output_starts_with_excitation(self):
        """Test the first period is the pre-filter delay line."""
        raw = KarplusStrongSynth(sample_rate=8000, duration=0.1, seed=3).render_raw(200.0)
        seed_line = KarplusStrongSynth(sample_rate=8000, duration=0.1, seed=3).excitation(40)
        assert np.allclose(raw[:40], seed_line)

    def test_decays(self):
        raw = KarplusStrongSynth(sample_rate=8000, duration=1.0, seed=2).render_raw(200.0)
        assert np.abs(raw[-400:]).max() < np.abs(raw[:400]).max()

    def test_deterministic(self):
        a = KarplusStrongSynth(sample_rate=8000, duration=0.1, seed=5).render(300.0)
        b = KarplusStrongSynth(sample_rate=8000, duration=0.1, seed=5).render(300.0)
        assert np.array_equal(a, b)

    def test_render_fretting(self):
        """Test a strum mixes played strings and stays in range."""
        synth = KarplusStrongSynth(sample_rate=8000, duration=0.2, seed=4)
        audio = synth.render_fretting(Fretting.of(["x", 3, 2, 0, 1, 0]))
        assert len(audio) == 1600
        assert audio.dtype == np.float32
        assert np.max(np.abs(audio)) <= 1.0
        assert np.any(audio != 0)

    def test_render_all_muted(self):
        synth = KarplusStrongSynth(sample_rate=8000, duration=0.1)
        audio = synth.render_fretting(Fretting.muted())
        assert len(audio) == 800
        assert not np.any(audio)


class TestResonanceChain:
    def test_dc_gain(self):
        """Test steady-state gain is the low shelf boost times master gain."""
        chain = ResonanceChain(sample_rate=44100)
        out = chain.process(np.ones(44100))
        assert out[-1] == pytest.approx(0.4 * 10 ** (3 / 20), rel=1e-3)

    def test_lowpass_unity_at_dc(self):
        bq = Biquad.lowpass(2500.0, 0.7, 44100)
        assert sum(bq.b) / sum(bq.a) == pytest.approx(1.0)

    def test_peaking_gain_at_center(self):
        """Test the peak reaches its gain at the center frequency."""
        bq = Biquad.peaking(180.0, 2.0, 6.0, 44100)
        z = np.exp(-1j * 2 * np.pi * 180.0 / 44100)
        h = (bq.b[0] + bq.b[1] * z + bq.b[2] * z**2) / (bq.a[0] + bq.a[1] * z + bq.a[2] * z**2)
        assert 20 * np.log10(abs(h)) == pytest.approx(6.0, abs=1e-6)


class TestExplorerPod:
    """Pod-level API tests."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "explorer"
        assert data["tuning"] == "F-A-C-G-C-E"
        assert data["env"] == get_settings().FX_ENV
        assert "POST /identify" in data["endpoints"]

    def test_sample_rate_from_settings(self):
        """Test the pod synthesizes at the shared FX_SAMPLE_RATE."""
        assert Config.SAMPLE_RATE == get_settings().FX_SAMPLE_RATE

    def test_health(self, client):
        response = client.post("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_identify(self, client):
        """Test the Fmaj7 shape through the API."""
        response = client.post("/identify", json={"frets": [0, 0, 0, 2, 0, 0]})
        assert response.status_code == 200
        data = response.json()
        assert data["chord"] == "Fmaj7"
        assert data["bass"] == "F"
        assert len(data["notes"]) == 6
        assert data["notes"][3] == {"string": 3, "fret": 2, "note": "A"}

    def test_identify_muted_markers(self, client):
        response = client.post("/identify", json={"frets": ["x", None, 0, -1, 0, 0]})
        assert response.status_code == 200
        assert response.json()["chord"] == "C/E (interval)"

    def test_identify_nothing(self, client):
        response = client.post("/identify", json={"frets": [None] * 6})
        assert response.status_code == 200
        data = response.json()
        assert data["chord"] == "No notes selected"
        assert data["bass"] is None
        assert data["notes"] == []

    @pytest.mark.parametrize(
        "frets",
        [[0, 0, 0, 0, 0], [0, 0, 0, 0, 0, 25], [0, 0, "q", 0, 0, 0], [0, 0, -4, 0, 0, 0]],
    )
    def test_identify_invalid(self, client, frets):
        """Test invalid frettings are rejected by validation."""
        response = client.post("/identify", json={"frets": frets})
        assert response.status_code == 422

    def test_extensions(self, client):
        response = client.post("/extensions", json={"frets": [0, 0, 0, 2, 0, 0]})
        assert response.status_code == 200
        data = response.json()
        assert data["chord"] == "Fmaj7"
        assert len(data["suggestions"]) == 5
        assert data["suggestions"][0]["extension"] == "add9"
        assert data["suggestions"][0]["frets"] == [2, 0, 0, 2, 0, 0]

    def test_extensions_empty(self, client):
        response = client.post("/extensions", json={"frets": ["x"] * 6})
        assert response.json()["suggestions"] == []

    def test_progression(self, client):
        """Test the user's chord leads the returned progression."""
        response = client.post("/progression", json={"frets": [0] * 6, "seed": 1})
        assert response.status_code == 200
        steps = response.json()["steps"]
        assert steps[0]["is_user"] is True
        assert steps[0]["degree"] == "IV"
        assert steps[0]["name"] == "Fmaj9"
        assert all(step["hints"] for step in steps[1:])

    def test_progression_seeded(self, client):
        a = client.post("/progression", json={"frets": [0, 0, 0, 2, 0, 0], "seed": 9}).json()
        b = client.post("/progression", json={"frets": [0, 0, 0, 2, 0, 0], "seed": 9}).json()
        assert a == b

    def test_voice_leading(self, client):
        response = client.post(
            "/voice-leading",
            json={"source": [0, 0, 0, 2, 0, 0], "target": [0, 0, 0, 0, 0, 0]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 77
        assert data["hints"] == ["5 strings stay", "1 string moves"]

    def test_synthesize_frequency(self, client):
        """Test a single pluck comes back as 16-bit WAV."""
        response = client.post("/synthesize", json={"frequency": 220.0, "duration": 0.2, "seed": 1})
        assert response.status_code == 200
        data = response.json()
        audio, sr = sf.read(io.BytesIO(base64.b64decode(data["audio"])))
        assert sr == 44100
        assert len(audio) == int(44100 * 0.2)

    def test_synthesize_fretting(self, client):
        response = client.post("/synthesize", json={"frets": [0, 0, 0, 0, 0, 0], "duration": 0.1})
        assert response.status_code == 200
        assert "Fmaj9" in response.json()["message"]

    @pytest.mark.parametrize(
        "payload",
        [
            {"duration": 0.1},
            {"frequency": 220.0, "frets": [0] * 6, "duration": 0.1},
            {"frequency": -5.0},
            {"frequency": 220.0, "duration": 60.0},
        ],
    )
    def test_synthesize_invalid(self, client, payload):
        response = client.post("/synthesize", json=payload)
        assert response.status_code == 422

    def test_library(self, client):
        chords = client.get("/library/chords").json()
        assert chords["Fmaj9"]["frets"] == [0] * 6
        assert chords["Fmaj9"]["identified_as"] == "Fmaj9"
        progressions = client.get("/library/progressions").json()
        assert len(progressions) == 12
        assert progressions[0]["steps"][0]["degree"] == "I"


class TestCli:
    @pytest.fixture(autouse=True)
    def restore_logging(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        yield
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    def test_identify(self, capsys):
        assert cli_main(["identify", "0", "0", "0", "2", "0", "0"]) == 0
        assert "Fmaj7" in capsys.readouterr().out

    def test_suggest(self, capsys):
        assert cli_main(["suggest", "000200", "--limit", "2"]) == 0
        out = capsys.readouterr().out
        assert "add9: fret the F string at 2" in out

    def test_progression(self, capsys):
        assert cli_main(["progression", "0", "0", "0", "0", "0", "0", "--seed", "1"]) == 0
        assert "Fmaj9" in capsys.readouterr().out

    def test_render(self, tmp_path, capsys):
        out = tmp_path / "chord.wav"
        assert cli_main(["render", "000000", "--duration", "0.1", "--seed", "1", "--out", str(out)]) == 0
        audio, sr = sf.read(str(out))
        assert sr == 44100
        assert len(audio) == 4410

    def test_printed_shape_accepted(self, capsys):
        """Test a shape printed with two-digit frets can be passed back in."""
        shape = str(Fretting.of(["x", 10, 12, 12, 10, "x"]))
        assert cli_main(["identify", "x", "10", "12", "12", "10", "x"]) == 0
        expected = capsys.readouterr().out
        assert cli_main(["identify", shape]) == 0
        assert capsys.readouterr().out == expected

    def test_play_owns_and_closes_output(self, monkeypatch):
        """Test play builds its own output and closes it afterwards."""
        created = []

        class FakeOutput:
            def __init__(self, sample_rate):
                self.sample_rate = sample_rate
                self.played = []
                self.closed = False
                created.append(self)

            def play(self, audio):
                self.played.append(audio)

            def close(self):
                self.closed = True

        monkeypatch.setattr(cli_module, "AudioOutput", FakeOutput)
        monkeypatch.setattr(cli_module.time, "sleep", lambda seconds: None)
        assert cli_main(["play", "000000", "--duration", "0.1", "--seed", "1"]) == 0
        assert len(created) == 1
        assert len(created[0].played[0]) == int(created[0].sample_rate * 0.1)
        assert created[0].closed

    def test_invalid_input(self, capsys):
        assert cli_main(["identify", "0", "0", "99", "0", "0", "0"]) == 2
        assert "error" in capsys.readouterr().err
