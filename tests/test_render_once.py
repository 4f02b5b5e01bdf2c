from bindgen_java.codegen.core.render_once import RenderOnceTracker


def test_first_mark_wins():
    tracker = RenderOnceTracker()
    assert tracker.mark_if_new("FfiConverterString")
    assert not tracker.mark_if_new("FfiConverterString")
    assert tracker.mark_if_new("FfiConverterOptionalString")


def test_tracker_contents():
    tracker = RenderOnceTracker()
    for name in ("b", "a", "b"):
        tracker.mark_if_new(name)
    assert "a" in tracker
    assert "c" not in tracker
    assert len(tracker) == 2
    assert list(tracker) == ["a", "b"]


def test_trackers_are_independent():
    first, second = RenderOnceTracker(), RenderOnceTracker()
    first.mark_if_new("async-support")
    assert second.mark_if_new("async-support")
