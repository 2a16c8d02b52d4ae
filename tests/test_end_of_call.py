import pytest

from voice_agent.domain.end_of_call import EndOfCallDetector


@pytest.mark.parametrize(
    "text",
    [
        "That's all for today",
        "that is all",
        "OK, please save it",
        "Finish the quotation now",
        "we're done here",
        "Great, goodbye!",
        "bye",
        "That’s all",
    ],
)
def test_closing_phrases(text):
    assert EndOfCallDetector().matches(text)


@pytest.mark.parametrize(
    "text",
    [
        "we're not done yet",
        "don't end the call",
        "do not save it yet",
        "add two lamps",
        "maybe three chairs",
        "save items separately",
        "",
    ],
)
def test_ignored_phrases(text):
    assert not EndOfCallDetector().matches(text)


def test_fires_once():
    detector = EndOfCallDetector()
    assert detector.check("that's all") is True
    assert detector.check("goodbye") is False
    detector.reset()
    assert detector.check("goodbye") is True
