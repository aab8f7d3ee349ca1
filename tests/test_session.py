import asyncio
import random

import numpy as np

from domain.models import *
from domain.reports import AnalysisReport, SimulationResult, TutorialGuide
from services.config import Settings
from services.gemini import GeminiError
from services.repository import MemoryStorage
from services.session import AppSession
from services.stores import KNOWLEDGE_KEY, MY_TEAM_KEY


def make_report(score="2-1"):
    return AnalysisReport.model_validate(
        {
            "opponentIntel": {"threatLevel": 5},
            "tacticalBattlePlan": {"recommendedFormation": "4-2-3-1", "settings": {"style": "Counter attack"}},
            "gameManagement": {},
            "prediction": {"mostLikelyScore": score},
        }
    )


class FakeClient:
    def __init__(self):
        self.fail = False
        self.calls = []
        self.closed = 0
        self.scan = ScanResult()
        self.report = make_report()
        self.simulation = SimulationResult.model_validate({"prediction": {"winChance": 55, "score": "2-1"}})

    def _call(self, name, *args):
        self.calls.append((name, args))
        if self.fail:
            raise GeminiError(f"{name} offline")

    def scan_screenshot(self, base64_image, mime_type="image/jpeg"):
        self._call("scan", base64_image)
        return self.scan

    def analyze_matchup(self, my_team, opponent, knowledge_context=None, language=Language.EN, notes=""):
        self._call("analyze", my_team, opponent, knowledge_context, language, notes)
        return self.report

    def generate_coaching_guide(self, report, knowledge_context=None, language=Language.EN):
        self._call("coach", report, knowledge_context, language)
        return TutorialGuide(formationSteps=["Pick 4-2-3-1"])

    def run_simulation(self, my_team, opponent, settings, line_tactics, language=Language.EN):
        self._call("simulate", settings, line_tactics, language)
        return self.simulation

    def process_document(self, base64_image, filename, mime_type="image/jpeg"):
        self._call("document", filename)
        return KnowledgeInsight(filename=filename, documentType="Guide", tacticalRules=["Rule 1"])

    def close(self):
        self.closed += 1


class FakeChannel:
    def __init__(self):
        self.closed = 0

    def send_realtime_input(self, media):
        pass

    def close(self):
        self.closed += 1


class FakeOutput:
    def __init__(self):
        self.closed = 0

    def current_time(self):
        return 0.0

    def start(self, frames, sample_rate, at):
        return None

    def close(self):
        self.closed += 1


def make_session(persist_knowledge=False, storage=None):
    settings = Settings(
        GEMINI_API_KEY="test-key",
        PERSIST_KNOWLEDGE_BASE=persist_knowledge,
        CLOCK_TICK_SECONDS=0,
        CLOCK_SETTLE_SECONDS=0,
        DEFAULT_LANGUAGE="en",
    )
    client = FakeClient()
    session = AppSession(settings=settings, storage=storage or MemoryStorage(), client=client, rng=random.Random(4))
    return session.open(), client


def test_open_hydrates_teams_from_storage():
    storage = MemoryStorage()
    first, _ = make_session(storage=storage)
    first.update_team(TeamSide.SELF, name="Kasimpasa")
    first.close()

    second, _ = make_session(storage=storage)
    assert second.teams.my_team.name == "Kasimpasa"
    assert second.teams.opponent == default_opponent()


def test_invalid_edit_sets_error_and_keeps_record():
    session, _ = make_session()
    assert session.update_team(TeamSide.OPPONENT, averageRating=500) is None
    assert session.error
    assert session.teams.opponent == default_opponent()
    assert session.update_team(TeamSide.OPPONENT, averageRating=100) is not None
    assert session.error is None


def test_scan_merges_and_persists():
    session, client = make_session()
    client.scan = ScanResult(teamName="Sivasspor", formation="5-3-2")
    merged = session.scan_team(TeamSide.OPPONENT, "aGVsbG8=")
    assert merged.name == "Sivasspor"
    assert merged.formation.value == "5-3-2"
    assert merged.averageRating == default_opponent().averageRating
    assert session.teams.opponent == merged


def test_failed_scan_leaves_team_untouched():
    session, client = make_session()
    client.fail = True
    assert session.scan_team(TeamSide.SELF, "aGVsbG8=") is None
    assert "Scan failed" in session.error
    assert session.teams.my_team == default_my_team()
    assert session.storage.get(MY_TEAM_KEY) is None


def test_analysis_passes_context_and_language():
    session, client = make_session()
    session.add_document("aGVsbG8=", "guide.png")
    session.toggle_language()
    report = session.analyze(notes="Derby day")
    assert report is client.report
    name, args = client.calls[-1]
    assert name == "analyze"
    assert args[2] == ["--- FROM DOC: guide.png (Guide) ---", "Rule 1"]
    assert args[3] == Language.TR
    assert args[4] == "Derby day"


def test_failed_analysis_keeps_previous_report():
    session, client = make_session()
    first = session.analyze()
    client.fail = True
    assert session.analyze() is None
    assert session.report is first
    assert "Analysis failed" in session.error


def test_new_analysis_clears_tutorial_and_simulation():
    session, client = make_session()
    session.analyze()
    session.coaching_guide()
    session.simulate()
    assert session.tutorial is not None
    assert session.clock.state == ClockState.INTRO
    session.analyze()
    assert session.tutorial is None
    assert session.simulation is None
    assert session.clock.state is None


def test_coach_and_simulation_need_a_report():
    session, client = make_session()
    assert session.coaching_guide() is None
    assert session.error
    assert session.simulate() is None
    assert session.error
    assert client.calls == []


def test_simulation_loads_clock_with_predicted_score():
    session, client = make_session()
    session.analyze()
    result = session.simulate()
    assert result is client.simulation
    name, args = client.calls[-1]
    assert name == "simulate"
    assert args[0].style == "Counter attack"
    clock = session.clock
    assert clock.state == ClockState.INTRO
    assert (clock.run_config.target_home, clock.run_config.target_away) == (2, 1)
    clock.start()
    assert asyncio.run(clock.run()) is True
    assert (clock.home_score, clock.away_score) == (2, 1)


def test_failed_simulation_keeps_previous_run():
    session, client = make_session()
    session.analyze()
    previous = session.simulate()
    config = session.clock.run_config
    client.fail = True
    assert session.simulate() is None
    assert session.simulation is previous
    assert session.clock.run_config is config


def test_documents_are_session_only_by_default():
    session, _ = make_session()
    insight = session.add_document("aGVsbG8=", "a.png")
    assert len(session.knowledge) == 1
    assert session.storage.get(KNOWLEDGE_KEY) is None
    assert session.remove_document(insight.id) is True
    assert session.remove_document(insight.id) is False
    assert session.knowledge_context() == []


def test_documents_persist_when_enabled():
    storage = MemoryStorage()
    session, _ = make_session(persist_knowledge=True, storage=storage)
    session.add_document("aGVsbG8=", "a.png")
    session.add_document("aGVsbG8=", "b.png")
    session.close()

    reopened, _ = make_session(persist_knowledge=True, storage=storage)
    assert [i.filename for i in reopened.knowledge] == ["a.png", "b.png"]


def test_failed_document_is_not_added():
    session, client = make_session()
    client.fail = True
    assert session.add_document("aGVsbG8=", "x.png") is None
    assert len(session.knowledge) == 0
    assert "x.png" not in (session.error or "")


def test_voice_open_and_double_close():
    session, _ = make_session()
    channel, output = FakeChannel(), FakeOutput()
    states = []
    assert session.open_voice(lambda model, config: channel, output, on_active=states.append) is True
    assert session.voice.active
    session.voice.send_microphone_frames(np.zeros(16))
    session.close_voice()
    session.close_voice()
    assert session.voice is None
    assert channel.closed == 1
    assert output.closed == 1
    assert states == [True, False]


def test_voice_connect_failure_sets_error():
    session, _ = make_session()
    output = FakeOutput()

    def refuse(model, config):
        raise ConnectionError("refused")

    assert session.open_voice(refuse, output) is False
    assert session.voice is None
    assert output.closed == 1
    assert "Voice connection failed" in session.error


def test_close_is_idempotent_and_releases_everything():
    session, client = make_session()
    session.analyze()
    session.simulate()
    token = session.clock.start()
    channel, output = FakeChannel(), FakeOutput()
    session.open_voice(lambda model, config: channel, output)
    session.close()
    session.close()
    assert token.cancelled
    assert session.clock.state is None
    assert channel.closed == 1
    assert client.closed == 2
    assert not session.is_open


def test_context_manager_opens_and_closes():
    settings = Settings(GEMINI_API_KEY="k", CLOCK_TICK_SECONDS=0, CLOCK_SETTLE_SECONDS=0)
    client = FakeClient()
    with AppSession(settings=settings, storage=MemoryStorage(), client=client) as session:
        assert session.is_open
    assert not session.is_open
    assert client.closed == 1


def test_language_toggles_between_english_and_turkish():
    session, _ = make_session()
    assert session.language == Language.EN
    assert session.toggle_language() == Language.TR
    assert session.toggle_language() == Language.EN


class FullDiskStorage(MemoryStorage):
    def set(self, key, value):
        raise OSError("disk full")


def test_failed_save_on_edit_keeps_team():
    session, _ = make_session(storage=FullDiskStorage())
    assert session.update_team(TeamSide.SELF, name="Changed FC") is None
    assert "disk full" in session.error
    assert session.teams.my_team == default_my_team()


def test_failed_save_on_scan_keeps_team():
    session, client = make_session(storage=FullDiskStorage())
    client.scan = ScanResult(teamName="Scanned FC")
    assert session.scan_team(TeamSide.OPPONENT, "aGVsbG8=") is None
    assert "disk full" in session.error
    assert session.teams.opponent == default_opponent()
