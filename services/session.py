"""
Application session: the single owner of mutable state for one user.

Holds the persisted team store, the knowledge base, the latest report,
coaching guide and simulation, the match clock and the voice session, with
an explicit open -> close lifecycle. Every remote action is caught here:
failures become a user-visible ``error`` string and leave the previous state
untouched.
"""
from __future__ import annotations

import logging
import random
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from domain.knowledge import KnowledgeBase
from domain.match_clock import MatchClockEngine
from domain.models import KnowledgeInsight, Language, TeamRecord, TeamSide
from domain.reports import AnalysisReport, SimulationResult, TutorialGuide
from services.audio import AudioCueSynthesizer, AudioSink
from services.config import Settings, get_settings
from services.gemini import TactixClient
from services.repository import DurableStorage, FileStorage
from services.stores import PersistedTeamStore, load_insights, save_insights
from services.voice import AudioOutput, LiveChannelFactory, Microphone, VoiceSession, connect_voice_session

logger = logging.getLogger(__name__)


class AppSession:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        storage: Optional[DurableStorage] = None,
        client: Optional[TactixClient] = None,
        audio_sink: Optional[AudioSink] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.storage = storage if storage is not None else FileStorage(self.settings.DATA_DIR)
        self.client = client or TactixClient(self.settings)
        self.language = Language(self.settings.DEFAULT_LANGUAGE)

        self.teams = PersistedTeamStore(self.storage)
        self.knowledge = KnowledgeBase()
        self.audio = AudioCueSynthesizer(audio_sink, sample_rate=self.settings.AUDIO_SAMPLE_RATE)
        self.clock = MatchClockEngine(
            audio=self.audio,
            rng=rng,
            tick_seconds=self.settings.CLOCK_TICK_SECONDS,
            settle_seconds=self.settings.CLOCK_SETTLE_SECONDS,
            flavor_probability=self.settings.FLAVOR_EVENT_PROBABILITY,
        )

        self.report: Optional[AnalysisReport] = None
        self.tutorial: Optional[TutorialGuide] = None
        self.simulation: Optional[SimulationResult] = None
        self.voice: Optional[VoiceSession] = None
        self.error: Optional[str] = None
        self.is_open = False

    # lifecycle

    def open(self) -> "AppSession":
        if self.is_open:
            return self
        self.teams.hydrate()
        if self.settings.PERSIST_KNOWLEDGE_BASE:
            self.knowledge.replace_all(load_insights(self.storage))
        self.is_open = True
        logger.info("Session opened for %s vs %s", self.teams.my_team.name, self.teams.opponent.name)
        return self

    def close(self) -> None:
        """Release the clock, voice channel and HTTP client. Safe to call repeatedly."""
        self.close_voice()
        self.close_simulation()
        self.client.close()
        if self.is_open:
            logger.info("Session closed")
        self.is_open = False

    def __enter__(self) -> "AppSession":
        return self.open()

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # helpers

    def _fail(self, message: str, exc: Exception) -> None:
        self.error = f"{message}: {exc}"
        logger.error(self.error)

    def knowledge_context(self) -> List[str]:
        return self.knowledge.flatten_to_context()

    def toggle_language(self) -> Language:
        self.language = Language.TR if self.language == Language.EN else Language.EN
        return self.language

    # teams

    def update_team(self, side: TeamSide, **changes: Any) -> Optional[TeamRecord]:
        self.error = None
        try:
            return self.teams.update(side, **changes)
        except ValidationError as e:
            self._fail("Invalid team data", e)
            return None
        except OSError as e:
            self._fail("Could not save team", e)
            return None

    def scan_team(self, side: TeamSide, base64_image: str, mime_type: str = "image/jpeg") -> Optional[TeamRecord]:
        self.error = None
        try:
            scanned = self.client.scan_screenshot(base64_image, mime_type)
        except Exception as e:
            self._fail("Scan failed", e)
            return None
        if scanned.is_empty:
            logger.info("Scan for %s extracted nothing", side.value)
        try:
            return self.teams.apply_scan(side, scanned)
        except OSError as e:
            self._fail("Could not save team", e)
            return None

    # remote analysis

    def analyze(self, notes: str = "") -> Optional[AnalysisReport]:
        self.error = None
        try:
            report = self.client.analyze_matchup(
                self.teams.my_team, self.teams.opponent, self.knowledge_context(), self.language, notes
            )
        except Exception as e:
            self._fail("Analysis failed", e)
            return None
        self.report = report
        # A new report invalidates whatever was derived from the old one
        self.tutorial = None
        self.close_simulation()
        return report

    def coaching_guide(self) -> Optional[TutorialGuide]:
        self.error = None
        if self.report is None:
            self.error = "Run an analysis before asking the coach."
            return None
        try:
            guide = self.client.generate_coaching_guide(self.report, self.knowledge_context(), self.language)
        except Exception as e:
            self._fail("Coach Alpha is currently unavailable", e)
            return None
        self.tutorial = guide
        return guide

    def simulate(self) -> Optional[SimulationResult]:
        self.error = None
        if self.report is None:
            self.error = "Run an analysis before simulating."
            return None
        plan = self.report.tacticalBattlePlan
        try:
            result = self.client.run_simulation(
                self.teams.my_team, self.teams.opponent, plan.settings, plan.lineTactics, self.language
            )
        except Exception as e:
            self._fail("Simulation Engine unavailable", e)
            return None
        self.simulation = result
        self.clock.load(result.prediction.score)
        return result

    def close_simulation(self) -> None:
        self.simulation = None
        self.clock.cancel()

    # knowledge base

    def add_document(self, base64_image: str, filename: str, mime_type: str = "image/jpeg") -> Optional[KnowledgeInsight]:
        self.error = None
        try:
            insight = self.client.process_document(base64_image, filename, mime_type)
        except Exception as e:
            self._fail("Failed to process document", e)
            return None
        self.knowledge.add(insight)
        self._persist_knowledge()
        return insight

    def remove_document(self, insight_id: str) -> bool:
        removed = self.knowledge.remove(insight_id)
        if removed:
            self._persist_knowledge()
        return removed

    def _persist_knowledge(self) -> None:
        if self.settings.PERSIST_KNOWLEDGE_BASE:
            save_insights(self.storage, self.knowledge.insights)

    # voice

    def open_voice(
        self,
        factory: LiveChannelFactory,
        output: AudioOutput,
        microphone: Optional[Microphone] = None,
        on_active: Optional[Callable[[bool], None]] = None,
    ) -> bool:
        self.error = None
        self.close_voice()
        try:
            self.voice = connect_voice_session(
                factory,
                output,
                microphone,
                language=self.language,
                model=self.settings.GEMINI_LIVE_MODEL,
                on_active=on_active,
            )
        except Exception as e:
            self._fail("Voice connection failed", e)
            self.voice = None
            return False
        return True

    def close_voice(self) -> None:
        voice, self.voice = self.voice, None
        if voice is not None:
            voice.close()
