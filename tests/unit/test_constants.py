"""
Tests for talentmatch.utils.constants: enums, transition table, scoring tables.
"""

import pytest

from talentmatch.utils.constants import (
    ALLOWED_TRANSITIONS,
    DEGREE_HIERARCHY,
    SCORE_THRESHOLDS,
    STATUS_SIDE_ENTRIES,
    TERMINAL_STATUSES,
    WEIGHTING_PROFILES,
    WITHDRAWABLE_STATUSES,
    ApplicationStatus,
    MatchScoreLevel,
    TimelineAction,
)


# ── MatchScoreLevel.from_score() ────────────────────────────────────────────


class TestMatchScoreLevelFromScore:
    def test_excellent_at_threshold(self):
        assert MatchScoreLevel.from_score(85) == MatchScoreLevel.EXCELLENT

    def test_good_just_below_excellent(self):
        assert MatchScoreLevel.from_score(84) == MatchScoreLevel.GOOD

    def test_fair_at_threshold(self):
        assert MatchScoreLevel.from_score(50) == MatchScoreLevel.FAIR

    def test_poor_below_fair(self):
        assert MatchScoreLevel.from_score(49) == MatchScoreLevel.POOR

    def test_poor_at_zero(self):
        assert MatchScoreLevel.from_score(0) == MatchScoreLevel.POOR


# ── ApplicationStatus / transitions ─────────────────────────────────────────


class TestApplicationStatus:
    def test_all_values_present(self):
        expected = {"pending", "reviewed", "shortlisted", "interview", "accepted", "rejected", "withdrawn"}
        assert {s.value for s in ApplicationStatus} == expected

    def test_terminal_property(self):
        assert ApplicationStatus.ACCEPTED.is_terminal
        assert not ApplicationStatus.INTERVIEW.is_terminal


class TestAllowedTransitions:
    def test_every_status_listed(self):
        assert set(ALLOWED_TRANSITIONS) == set(ApplicationStatus)

    def test_terminal_states_have_no_edges(self):
        for status in TERMINAL_STATUSES:
            assert ALLOWED_TRANSITIONS[status] == frozenset()

    def test_no_edge_back_to_pending(self):
        for targets in ALLOWED_TRANSITIONS.values():
            assert ApplicationStatus.PENDING not in targets

    def test_no_self_loops(self):
        for source, targets in ALLOWED_TRANSITIONS.items():
            assert source not in targets

    def test_withdrawable_are_the_non_terminal_states(self):
        assert WITHDRAWABLE_STATUSES == set(ApplicationStatus) - TERMINAL_STATUSES

    @pytest.mark.parametrize("status", ["pending", "reviewed", "shortlisted", "interview"])
    def test_withdrawal_always_reachable_before_terminal(self, status):
        assert ApplicationStatus.WITHDRAWN in ALLOWED_TRANSITIONS[ApplicationStatus(status)]

    def test_side_entries(self):
        assert STATUS_SIDE_ENTRIES[ApplicationStatus.INTERVIEW][0] == TimelineAction.INTERVIEW_SCHEDULED
        assert ApplicationStatus.SHORTLISTED not in STATUS_SIDE_ENTRIES


# ── scoring tables ───────────────────────────────────────────────────────────


class TestScoringTables:
    def test_profiles_sum_to_100(self):
        for weights in WEIGHTING_PROFILES.values():
            assert sum(weights.values()) == 100

    def test_employer_ignores_employment_type(self):
        assert WEIGHTING_PROFILES["employer"]["employment_type"] == 0
        assert WEIGHTING_PROFILES["employer"]["education"] == 15

    def test_candidate_weights(self):
        assert WEIGHTING_PROFILES["candidate"]["employment_type"] == 10
        assert WEIGHTING_PROFILES["candidate"]["education"] == 5

    def test_degree_hierarchy_ordering(self):
        assert DEGREE_HIERARCHY["high school"] < DEGREE_HIERARCHY["bachelor"] < DEGREE_HIERARCHY["master"]
        assert DEGREE_HIERARCHY["phd"] == DEGREE_HIERARCHY["doctorate"]

    def test_thresholds_descend(self):
        assert SCORE_THRESHOLDS["excellent"] > SCORE_THRESHOLDS["good"] > SCORE_THRESHOLDS["fair"]
