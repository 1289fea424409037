"""Tests for the timeline segmentation state machine."""

from focus_timeline.models import CurrentSegment, TimelineEntry
from focus_timeline.segmenter import TimelineSegmenter


class TestTimelineSegmenter:
    def test_starts_idle(self):
        """Test no segment is open before the first match."""
        segmenter = TimelineSegmenter()
        assert not segmenter.is_tracking
        assert segmenter.current is None

    def test_first_match_opens_segment(self):
        """Test the first match opens a segment without emitting anything."""
        segmenter = TimelineSegmenter()
        assert segmenter.observe("A", 0) is None
        assert segmenter.current == CurrentSegment("A", 0)

    def test_same_app_keeps_start(self):
        """Test repeated matches of the same app keep the original start."""
        segmenter = TimelineSegmenter()
        segmenter.observe("A", 0)
        assert segmenter.observe("A", 3) is None
        assert segmenter.current == CurrentSegment("A", 0)

    def test_switch_closes_previous_segment(self):
        """Test A@0, A@3, B@10 yields exactly {A, 0, 10} with B still open."""
        segmenter = TimelineSegmenter()
        emitted = [
            segmenter.observe("A", 0),
            segmenter.observe("A", 3),
            segmenter.observe("B", 10),
        ]
        assert [e for e in emitted if e] == [TimelineEntry("A", 0, 10)]
        assert segmenter.current == CurrentSegment("B", 10)

    def test_same_second_switch_is_dropped(self):
        """Test a switch within the opening second emits no entry."""
        segmenter = TimelineSegmenter()
        segmenter.observe("A", 5)
        assert segmenter.observe("B", 5) is None
        assert segmenter.current == CurrentSegment("B", 5)

    def test_switching_back_opens_new_segment(self):
        """Test returning to an earlier app starts a fresh segment."""
        segmenter = TimelineSegmenter()
        segmenter.observe("A", 0)
        segmenter.observe("B", 4)
        assert segmenter.observe("A", 9) == TimelineEntry("B", 4, 9)
        assert segmenter.current == CurrentSegment("A", 9)

    def test_clock_stepping_back_keeps_start_order(self):
        """Test a switch seen with an earlier wall clock does not reorder starts."""
        segmenter = TimelineSegmenter()
        segmenter.observe("A", 100)
        assert segmenter.observe("B", 90) is None
        assert segmenter.current == CurrentSegment("B", 100)
        assert segmenter.observe("C", 105) == TimelineEntry("B", 100, 105)
