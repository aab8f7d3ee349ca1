from components.pitch import field_svg
from components.simulation_room import StreamlitAudioSink, commentary_markdown
from domain.formations import FormationCode
from domain.models import *


class FakePlaceholder:
    def __init__(self):
        self.calls = []

    def audio(self, data, format=None, autoplay=False):
        self.calls.append((data, format, autoplay))


def test_field_svg_draws_eleven_players():
    svg = field_svg(FormationCode.F4231, color="#ff0000")
    assert svg.startswith("<svg")
    assert svg.count("fill='#ff0000'") == 11


def test_commentary_markdown_keeps_feed_order():
    entries = [
        CommentaryEntry(30, "GOAL!!! The stadium erupts!", CommentaryKind.GOAL),
        CommentaryEntry(12, "Corner kick awarded."),
    ]
    text = commentary_markdown(entries)
    assert text.index("30'") < text.index("12'")
    assert "**GOAL!!! The stadium erupts!**" in text


def test_commentary_markdown_empty():
    assert "Waiting" in commentary_markdown([])


def test_streamlit_sink_autoplays_wav():
    slot = FakePlaceholder()
    StreamlitAudioSink(slot).play(b"RIFF....")
    assert slot.calls == [(b"RIFF....", "audio/wav", True)]
    StreamlitAudioSink().play(b"RIFF")
