"""
Tests for fixed-pairs pairing: rotating opponents and the replay fallback.
"""
import logging

from fixed_pairs.functions import generate_fixed_pairs_matches
from tournament.history import opposed_before


def _matchups(matches):
    return {frozenset((m.pair1.id, m.pair2.id)) for m in matches}


def _round_one(builders, t):
    a, b, c, d = t.pairs
    return builders.round(1, [
        builders.match("m1", a, b, result="pair1"),
        builders.match("m2", c, d, result="pair2", court=2),
    ])


class TestFixedPairsMatches:

    def test_every_pair_plays_once(self, builders):
        t = builders.fixed_pairs(4)
        matches = generate_fixed_pairs_matches(t)

        assert len(matches) == 2
        assert [m.court for m in matches] == [1, 2]
        ids = [p.id for m in matches for p in (m.pair1, m.pair2)]
        assert sorted(ids) == ["pair-1", "pair-2", "pair-3", "pair-4"]

    def test_head_of_queue_plays_first(self, builders):
        t = builders.fixed_pairs(6)
        for _ in range(10):
            assert generate_fixed_pairs_matches(t)[0].pair1.id == "pair-1"

    def test_avoids_previous_opponents(self, builders):
        t = builders.fixed_pairs(4)
        t.rounds = [_round_one(builders, t)]

        for _ in range(25):
            matches = generate_fixed_pairs_matches(t)
            assert len(matches) == 2
            for m in matches:
                assert not opposed_before(m.pair1.id, m.pair2.id, t.rounds)
            assert _matchups(matches) in (
                {frozenset(("pair-1", "pair-3")), frozenset(("pair-2", "pair-4"))},
                {frozenset(("pair-1", "pair-4")), frozenset(("pair-2", "pair-3"))},
            )

    def test_forced_repeat_with_two_pairs(self, builders):
        t = builders.fixed_pairs(2)
        a, b = t.pairs
        t.rounds = [builders.round(1, [builders.match("m1", a, b, result="draw")])]

        matches = generate_fixed_pairs_matches(t)
        assert _matchups(matches) == {frozenset(("pair-1", "pair-2"))}
        assert matches[0].id != "m1"

    def test_odd_pair_sits_out_in_first_round(self, builders):
        t = builders.fixed_pairs(3)
        matches = generate_fixed_pairs_matches(t)
        assert len(matches) == 1
        assert matches[0].pair1.id == "pair-1"


class TestReplayFallback:
    """
    When fewer than half the pairs get a match and history exists, an earlier
    round is replayed: index = completed rounds % number of rounds. This is a
    fixed replay policy, not a search for the best matchups.
    """

    def test_replays_only_round(self, builders, caplog):
        t = builders.fixed_pairs(3)
        a, b, c = t.pairs
        t.rounds = [builders.round(1, [builders.match("m1", a, c, result="pair1")])]

        with caplog.at_level(logging.WARNING, logger="fixed_pairs.functions"):
            matches = generate_fixed_pairs_matches(t)

        assert len(matches) == 1
        assert (matches[0].pair1.id, matches[0].pair2.id) == ("pair-1", "pair-3")
        assert matches[0].id != "m1"
        assert matches[0].court == 1
        assert not matches[0].completed
        assert matches[0].result is None
        assert "replaying matchups of round 1" in caplog.text

    def test_replay_picks_round_by_completed_count_modulo(self, builders):
        t = builders.fixed_pairs(3)
        a, b, c = t.pairs
        t.rounds = [
            builders.round(1, [builders.match("m1", a, b, result="pair1")]),
            builders.round(2, [builders.match("m2", a, c)]),
        ]
        # one completed round out of two -> rounds[1]
        matches = generate_fixed_pairs_matches(t)
        assert (matches[0].pair1.id, matches[0].pair2.id) == ("pair-1", "pair-3")

        t.rounds[1] = builders.round(2, [builders.match("m2", a, c, result="pair2")])
        # two completed out of two -> rounds[0]
        matches = generate_fixed_pairs_matches(t)
        assert (matches[0].pair1.id, matches[0].pair2.id) == ("pair-1", "pair-2")

    def test_replay_keeps_every_matchup_of_the_round(self, builders):
        t = builders.fixed_pairs(5)
        a, b, c, d, e = t.pairs
        t.rounds = [builders.round(1, [
            builders.match("m1", a, b, result="pair1"),
            builders.match("m2", c, d, result="pair2", court=2),
        ])]

        matches = generate_fixed_pairs_matches(t)
        assert [(m.pair1.id, m.pair2.id) for m in matches] == [("pair-1", "pair-2"), ("pair-3", "pair-4")]
        assert [m.court for m in matches] == [1, 2]

    def test_no_replay_without_history(self, builders):
        t = builders.fixed_pairs(5)
        assert len(generate_fixed_pairs_matches(t)) == 2
