"""Chord Explorer Pod: FastAPI service for the FACGCE theory engine.

Names chords, suggests extensions, builds progressions and renders
plucked-string audio as base64 WAV.
"""

from __future__ import annotations

import logging
import random
from contextlib import asynccontextmanager
from typing import List, Optional, Union

from fastapi import FastAPI, HTTPException
from opentelemetry import trace
from pydantic import BaseModel, Field, field_validator, model_validator

from fxcore.audio import to_wav_base64
from fxcore.config import get_settings
from fxcore.logging import setup_logging, setup_tracing
from fxtheory.extensions import suggest_extensions
from fxtheory.identify import identify_chord
from fxtheory.library import CHORD_LIBRARY, PROGRESSIONS
from fxtheory.progressions import Progression, ProgressionEngine
from fxtheory.tuning import FACGCE, Fretting, note_name
from fxtheory.voice_leading import voice_leading_hints, voice_leading_score

from .config import Config
from .synth import KarplusStrongSynth

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("fx.explorer")

SERVICE_NAME = Config.SERVICE_NAME
SERVICE_VERSION = Config.SERVICE_VERSION

FretInput = List[Union[int, str, None]]


def _validate_frets(value):
    return Fretting.of(value).to_list()


class FrettingRequest(BaseModel):
    """A single six-string shape. Muted strings are null, "x" or -1."""

    frets: FretInput = Field(..., min_length=6, max_length=6)

    @field_validator("frets")
    @classmethod
    def validate_frets(cls, value):
        return _validate_frets(value)

    @property
    def fretting(self) -> Fretting:
        return Fretting.of(self.frets)


class ProgressionRequest(FrettingRequest):
    seed: Optional[int] = Field(default=None, ge=0, description="Deterministic seed")


class VoiceLeadingRequest(BaseModel):
    source: FretInput = Field(..., min_length=6, max_length=6)
    target: FretInput = Field(..., min_length=6, max_length=6)

    @field_validator("source", "target")
    @classmethod
    def validate_shape(cls, value):
        return _validate_frets(value)


class SynthesizeRequest(BaseModel):
    """Render one frequency or a strummed fretting."""

    frequency: Optional[float] = Field(default=None, gt=0.0, le=Config.SAMPLE_RATE / 2)
    frets: Optional[FretInput] = Field(default=None, min_length=6, max_length=6)
    duration: float = Field(default=Config.NOTE_DURATION, gt=0.0, le=Config.MAX_NOTE_DURATION)
    seed: int = Field(default=42, ge=0)

    @field_validator("frets")
    @classmethod
    def validate_frets(cls, value):
        if value is None:
            return value
        return _validate_frets(value)

    @model_validator(mode="after")
    def check_source(self):
        if (self.frequency is None) == (self.frets is None):
            raise ValueError("Provide exactly one of frequency or frets")
        return self


class NoteInfo(BaseModel):
    string: int
    fret: int
    note: str


class IdentifyResponse(BaseModel):
    chord: str
    bass: Optional[str] = None
    notes: List[NoteInfo]


class SynthesizeResponse(BaseModel):
    sample_rate: int
    duration: float
    audio: str  # base64 encoded WAV
    message: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown hooks for logging/tracing."""
    try:
        setup_logging()
    except Exception as exc:  # pragma: no cover - logging fallback
        logging.basicConfig(level=logging.INFO)
        logger.warning(f"Logging fallback (bad env?): {exc}")

    try:
        setup_tracing(service_name=f"{SERVICE_NAME}-pod")
    except Exception as exc:  # pragma: no cover - optional tracing
        logger.info(f"Tracing not configured: {exc}")
    logger.info(f"{SERVICE_NAME} pod starting (v{SERVICE_VERSION}, env={get_settings().FX_ENV})...")
    yield
    logger.info(f"{SERVICE_NAME} pod shutting down...")


app = FastAPI(
    title="Chord Explorer Pod",
    description="Chord naming, extensions and progressions for FACGCE tuning",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


@app.get("/")
async def root():
    """API info endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "env": get_settings().FX_ENV,
        "tuning": "-".join(FACGCE.names),
        "description": "Music theory engine for open FACGCE tuning",
        "endpoints": {
            "GET /": "This info",
            "POST /health": "Health check",
            "POST /identify": "Name the chord of a fretting",
            "POST /extensions": "Suggest one-string extensions",
            "POST /progression": "Build a progression around a fretting",
            "POST /voice-leading": "Score the move between two frettings",
            "POST /synthesize": "Render plucked-string audio",
            "GET /library/chords": "Reference chord shapes",
            "GET /library/progressions": "Reference progressions",
        },
    }


@app.post("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@app.post("/identify", response_model=IdentifyResponse)
async def identify(request: FrettingRequest):
    fretting = request.fretting
    with tracer.start_as_current_span("explorer.identify") as span:
        chord = identify_chord(fretting)
        span.set_attribute("explorer.chord", chord)
        bass = FACGCE.bass_note(fretting)
        notes = [
            NoteInfo(string=i, fret=f, note=note_name(FACGCE.note_for_string(i, f)))
            for i, f in enumerate(fretting)
            if f is not None
        ]
        return IdentifyResponse(
            chord=chord,
            bass=None if bass is None else note_name(bass),
            notes=notes,
        )


@app.post("/extensions")
async def extensions(request: FrettingRequest):
    fretting = request.fretting
    with tracer.start_as_current_span("explorer.extensions") as span:
        chord = identify_chord(fretting)
        suggestions = suggest_extensions(fretting, chord)
        span.set_attribute("explorer.suggestions", len(suggestions))
        return {"chord": chord, "suggestions": [s.to_dict() for s in suggestions]}


@app.post("/progression")
async def progression(request: ProgressionRequest):
    with tracer.start_as_current_span("explorer.progression") as span:
        engine = ProgressionEngine(rng=random.Random(request.seed))
        result: Progression = engine.generate(request.fretting)
        span.set_attribute("explorer.progression", result.name)
        return result.to_dict()


@app.post("/voice-leading")
async def voice_leading(request: VoiceLeadingRequest):
    source = Fretting.of(request.source)
    target = Fretting.of(request.target)
    return {
        "score": voice_leading_score(source, target),
        "hints": voice_leading_hints(source, target),
    }


@app.post("/synthesize", response_model=SynthesizeResponse)
async def synthesize(request: SynthesizeRequest):
    """Render audio for a single frequency or a strummed fretting."""
    with tracer.start_as_current_span("explorer.synthesize") as span:
        try:
            span.set_attribute("explorer.seed", request.seed)
            synth = KarplusStrongSynth(
                sample_rate=Config.SAMPLE_RATE,
                duration=request.duration,
                seed=request.seed,
            )
            if request.frequency is not None:
                audio = synth.render(request.frequency)
                message = f"Rendered {request.frequency:.2f} Hz"
            else:
                fretting = Fretting.of(request.frets)
                audio = synth.render_fretting(fretting, strum=Config.STRUM_SECONDS)
                message = f"Rendered {identify_chord(fretting)}"

            return SynthesizeResponse(
                sample_rate=synth.sample_rate,
                duration=request.duration,
                audio=to_wav_base64(audio, synth.sample_rate),
                message=message,
            )
        except HTTPException:
            raise
        except ValueError as exc:
            logger.error(f"Validation error: {exc}")
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except Exception as exc:  # pragma: no cover - unexpected errors
            logger.error(f"Synthesis error: {exc}")
            raise HTTPException(status_code=500, detail="Synthesis failed") from exc


@app.get("/library/chords")
async def library_chords():
    return {
        name: {
            "frets": shape.fretting.to_list(),
            "family": shape.family,
            "description": shape.description,
            "identified_as": identify_chord(shape.fretting),
        }
        for name, shape in CHORD_LIBRARY.items()
    }


@app.get("/library/progressions")
async def library_progressions():
    return [Progression.from_library(entry).to_dict() for entry in PROGRESSIONS]


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(
        "pods.explorer.main:app",
        host="0.0.0.0",
        port=Config.SERVICE_PORT,
        log_level="info",
    )
