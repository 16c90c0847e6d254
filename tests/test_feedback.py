from spin_core.feedback import EVENTS, SPIN_START, WIN, NullFeedbackSink, RecordingFeedbackSink


def test_null_sink_is_silent():
    sink = NullFeedbackSink()
    for e in EVENTS:
        assert sink.play(e) is None


def test_recording_sink_keeps_order():
    sink = RecordingFeedbackSink()
    sink.play(SPIN_START)
    sink.play(WIN)
    sink.play("confetti")
    assert sink.events == [SPIN_START, WIN, "confetti"]
