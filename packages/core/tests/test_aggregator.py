"""Tests for CommentAggregator."""

import threading

from gerritlens_core.aggregator import CommentAggregator
from gerritlens_core.models import InlineComment

C1 = InlineComment(line=1, message="first")
C2 = InlineComment(line=2, message="second")


def test_empty_snapshot():
    assert CommentAggregator().snapshot() == {}


def test_record_then_snapshot():
    agg = CommentAggregator()
    agg.record("src/a.py", [C1, C2])
    assert agg.snapshot() == {"src/a.py": [C1, C2]}


def test_second_record_for_same_path_overwrites():
    agg = CommentAggregator()
    agg.record("pathA", [C1])
    agg.record("pathA", [C2])
    assert agg.snapshot()["pathA"] == [C2]


def test_empty_list_is_recorded():
    agg = CommentAggregator()
    agg.record("pathA", [])
    assert agg.snapshot() == {"pathA": []}
    assert len(agg) == 1


def test_insertion_order_preserved():
    agg = CommentAggregator()
    for path in ("c", "a", "b"):
        agg.record(path, [C1])
    assert list(agg.snapshot()) == ["c", "a", "b"]


def test_snapshot_does_not_clear_state():
    agg = CommentAggregator()
    agg.record("pathA", [C1])
    agg.snapshot()
    assert agg.snapshot() == {"pathA": [C1]}


def test_snapshot_is_a_copy():
    agg = CommentAggregator()
    agg.record("pathA", [C1])
    snap = agg.snapshot()
    snap["pathA"].append(C2)
    snap["pathB"] = []
    assert agg.snapshot() == {"pathA": [C1]}


def test_record_copies_input_sequence():
    agg = CommentAggregator()
    comments = [C1]
    agg.record("pathA", comments)
    comments.append(C2)
    assert agg.snapshot()["pathA"] == [C1]


def test_total_comments():
    agg = CommentAggregator()
    agg.record("a", [C1, C2])
    agg.record("b", [C1])
    assert agg.total_comments() == 3


def test_concurrent_records_are_not_lost():
    agg = CommentAggregator()

    def worker(offset):
        for i in range(200):
            agg.record(f"file-{offset}-{i}", [C1])

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(agg) == 800
