"""
Tests for talentmatch.core.stats.stats_aggregator: dashboard statistics over applications.
"""

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

from talentmatch.core.stats import StatsAggregator, compute_application_stats, incremental_mean
from talentmatch.utils.constants import ApplicationStatus

NOW = datetime(2024, 6, 15, 12, 0, 0)


# ── incremental_mean ─────────────────────────────────────────────────────────


class TestIncrementalMean:
    def test_first_value(self):
        assert incremental_mean(0.0, 0, 10) == 10

    def test_second_value(self):
        assert incremental_mean(10.0, 1, 20) == 15

    def test_matches_arithmetic_mean(self):
        values = [80, 40, 65, 90, 15]
        mean = 0.0
        for count, value in enumerate(values):
            mean = incremental_mean(mean, count, value)
        assert mean == pytest.approx(sum(values) / len(values))

    def test_differs_from_pairwise_average(self):
        # (old + new) / 2 would give 50 here
        assert incremental_mean(80.0, 3, 20) == pytest.approx(65.0)


# ── compute ──────────────────────────────────────────────────────────────────


class TestEmptyInput:
    def test_empty_collection(self, aggregator):
        stats = aggregator.compute([], now=NOW)
        assert stats.total == 0
        assert stats.viewed == 0
        assert stats.view_rate == 0
        assert stats.avg_score == 0.0
        assert stats.by_status == {}
        assert stats.daily_counts == {}

    def test_none_collection(self, aggregator):
        assert aggregator.compute(None, now=NOW).total == 0


class TestCountsAndAverages:
    @pytest.fixture
    def applications(self, make_application):
        return [
            make_application(score=80, skills_match=50, experience=5),
            make_application(score=70, skills_match=41, experience=2),
            make_application(
                status=ApplicationStatus.REJECTED,
                score=30,
                skills_match=10,
                viewed_at=NOW,
            ),
        ]

    def test_grouped_by_status(self, aggregator, applications):
        stats = aggregator.compute(applications, now=NOW)
        pending = stats.by_status["pending"]
        assert pending.count == 2
        assert pending.avg_score == 75.0
        assert pending.avg_skills_match == 45.5
        assert pending.avg_experience == 3.5
        assert stats.by_status["rejected"].count == 1

    def test_totals_and_view_rate(self, aggregator, applications):
        stats = aggregator.compute(applications, now=NOW)
        assert stats.total == 3
        assert stats.viewed == 1
        assert stats.view_rate == 33

    def test_overall_averages_one_decimal(self, aggregator, applications):
        stats = aggregator.compute(applications, now=NOW)
        assert stats.avg_score == 60.0
        assert stats.avg_skills_match == 33.7

    def test_inputs_not_mutated(self, aggregator, applications):
        before = [app.model_dump() for app in applications]
        aggregator.compute(applications, now=NOW)
        assert [app.model_dump() for app in applications] == before


class TestFilters:
    def test_company_filter(self, aggregator, make_application):
        company = ObjectId()
        apps = [make_application(company_id=company), make_application()]
        assert aggregator.compute(apps, company_id=str(company), now=NOW).total == 1

    def test_job_filter(self, aggregator, make_application):
        job = ObjectId()
        apps = [make_application(job_id=job), make_application(job_id=job), make_application()]
        assert aggregator.compute(apps, job_id=job, now=NOW).total == 2

    def test_date_range(self, aggregator, make_application):
        apps = [
            make_application(applied_at=NOW - timedelta(days=10)),
            make_application(applied_at=NOW - timedelta(days=2)),
        ]
        stats = aggregator.compute(apps, start=NOW - timedelta(days=5), end=NOW, now=NOW)
        assert stats.total == 1
        assert stats.period_start == NOW - timedelta(days=5)

    def test_inverted_range_is_empty(self, aggregator, make_application):
        apps = [make_application()]
        stats = aggregator.compute(apps, start=NOW, end=NOW - timedelta(days=1), now=NOW)
        assert stats.total == 0
        assert stats.view_rate == 0

    def test_malformed_documents_skipped(self, aggregator):
        valid = {
            "job_id": str(ObjectId()),
            "company_id": str(ObjectId()),
            "applicant_id": str(ObjectId()),
            "resume": "cv.pdf",
            "score": 55,
            "applied_at": "2024-06-14T09:30:00",
        }
        stats = aggregator.compute([valid, {"bogus": 1}, "junk"], now=NOW)
        assert stats.total == 1
        assert stats.avg_score == 55.0


class TestTimeSeries:
    def test_daily_window(self, aggregator, make_application):
        apps = [
            make_application(applied_at=NOW - timedelta(days=1)),
            make_application(applied_at=NOW - timedelta(days=1, hours=3)),
            make_application(applied_at=NOW - timedelta(days=40)),
        ]
        stats = aggregator.compute(apps, now=NOW)
        assert stats.daily_counts == {"2024-06-14": 2}

    def test_custom_window(self, aggregator, make_application):
        apps = [
            make_application(applied_at=NOW - timedelta(days=1)),
            make_application(applied_at=NOW - timedelta(days=40)),
        ]
        stats = aggregator.compute(apps, window_days=60, now=NOW)
        assert list(stats.daily_counts) == ["2024-05-06", "2024-06-14"]

    def test_daily_keys_sorted(self, aggregator, make_application):
        apps = [
            make_application(applied_at=NOW - timedelta(days=1)),
            make_application(applied_at=NOW - timedelta(days=5)),
            make_application(applied_at=NOW - timedelta(days=3)),
        ]
        keys = list(aggregator.compute(apps, now=NOW).daily_counts)
        assert keys == sorted(keys)

    def test_monthly_window(self, aggregator, make_application):
        apps = [
            make_application(applied_at=datetime(2023, 6, 20)),
            make_application(applied_at=datetime(2023, 7, 10)),
            make_application(applied_at=NOW),
        ]
        stats = aggregator.compute(apps, now=NOW)
        assert stats.monthly_counts == {"2023-07": 1, "2024-06": 1}
        # Totals still cover everything passed in
        assert stats.total == 3

    def test_shared_helper(self, make_application):
        stats = compute_application_stats([make_application(applied_at=NOW)], now=NOW)
        assert stats.total == 1
        assert stats.daily_counts == {"2024-06-15": 1}

    def test_zero_day_window_is_empty(self, aggregator, make_application):
        stats = aggregator.compute([make_application(applied_at=NOW)], window_days=0, now=NOW)
        assert stats.total == 1
        assert stats.daily_counts == {}

    def test_zero_window_setting_not_replaced_by_default(self, make_application):
        aggregator = StatsAggregator(daily_window_days=0, top_candidates_limit=0)
        assert aggregator.daily_window_days == 0
        assert aggregator.compute([make_application(applied_at=NOW)], now=NOW).daily_counts == {}
        assert aggregator.rank_top_candidates([make_application()]) == []


def raw_document(**overrides):
    document = {
        "job_id": str(ObjectId()),
        "company_id": str(ObjectId()),
        "applicant_id": str(ObjectId()),
        "resume": "cv.pdf",
        "score": 70,
    }
    document.update(overrides)
    return document


class TestOffsetTimestamps:
    def test_utc_suffix_documents(self, aggregator):
        documents = [
            raw_document(
                applied_at="2024-06-14T09:30:00.000Z",
                viewed_at="2024-06-14T13:00:00+02:00",
                created_at="2024-06-14T09:30:00.000Z",
                updated_at="2024-06-14T11:00:00.000Z",
            ),
            raw_document(applied_at="2023-01-02T10:00:00Z"),
        ]
        stats = aggregator.compute(documents, now=NOW)
        assert stats.total == 2
        assert stats.viewed == 1
        assert stats.daily_counts == {"2024-06-14": 1}
        assert stats.monthly_counts == {"2024-06": 1}

    def test_offset_shifts_the_day(self, aggregator):
        # 23:30 at UTC-5 is 04:30 UTC the next day
        stats = aggregator.compute([raw_document(applied_at="2024-06-13T23:30:00-05:00")], now=NOW)
        assert stats.daily_counts == {"2024-06-14": 1}

    def test_aware_bounds_and_now(self, aggregator, make_application):
        apps = [
            make_application(applied_at=NOW - timedelta(days=2)),
            make_application(applied_at=NOW - timedelta(days=10)),
        ]
        stats = aggregator.compute(
            apps,
            start=(NOW - timedelta(days=5)).replace(tzinfo=timezone.utc),
            end=NOW.replace(tzinfo=timezone.utc),
            now=NOW.replace(tzinfo=timezone.utc),
        )
        assert stats.total == 1
        assert stats.daily_counts == {"2024-06-13": 1}

    def test_job_analytics(self, aggregator):
        company = str(ObjectId())
        document = raw_document(
            company_id=company,
            applied_at="2024-06-10T12:00:00.000Z",
            viewed_at="2024-06-12T14:00:00+02:00",
        )
        rows = aggregator.job_analytics([document], company_id=company, now=NOW)
        assert len(rows) == 1
        assert rows[0].avg_response_days == 2.0

    def test_ranking_mixed_offsets(self, aggregator):
        documents = [
            raw_document(score=60, skills_match=60, applied_at="2024-06-14T08:00:00+00:00"),
            raw_document(score=60, skills_match=60, applied_at="2024-06-14T10:00:00+05:00"),
        ]
        ranked = aggregator.rank_top_candidates(documents)
        assert [r.applied_at for r in ranked] == [datetime(2024, 6, 14, 8), datetime(2024, 6, 14, 5)]


# ── rank_top_candidates ──────────────────────────────────────────────────────


class TestRankTopCandidates:
    def test_weighted_towards_skills(self, aggregator, make_application):
        apps = [
            make_application(score=90, skills_match=50, name="A"),
            make_application(score=50, skills_match=90, name="B"),
            make_application(score=70, skills_match=70, name="C"),
        ]
        ranked = aggregator.rank_top_candidates(apps)
        assert [r.name for r in ranked] == ["B", "C", "A"]
        assert ranked[0].rank_score == 74.0

    def test_ties_go_to_most_recent(self, aggregator, make_application):
        apps = [
            make_application(score=60, skills_match=60, name="older", applied_at=NOW - timedelta(days=3)),
            make_application(score=60, skills_match=60, name="newer", applied_at=NOW),
        ]
        assert [r.name for r in aggregator.rank_top_candidates(apps)] == ["newer", "older"]

    def test_limit(self, aggregator, make_application):
        apps = [make_application(score=i * 10) for i in range(6)]
        assert len(aggregator.rank_top_candidates(apps, limit=3)) == 3

    def test_job_filter(self, aggregator, make_application):
        job = ObjectId()
        apps = [make_application(job_id=job, score=10), make_application(score=99)]
        ranked = aggregator.rank_top_candidates(apps, job_id=job)
        assert len(ranked) == 1
        assert ranked[0].score == 10

    def test_empty(self, aggregator):
        assert aggregator.rank_top_candidates([]) == []


# ── job_analytics ────────────────────────────────────────────────────────────


class TestJobAnalytics:
    def test_per_job_rows(self, aggregator, make_application):
        company, busy_job, quiet_job = ObjectId(), ObjectId(), ObjectId()
        apps = [
            make_application(
                company_id=company,
                job_id=busy_job,
                score=80,
                applied_at=NOW - timedelta(days=4),
                viewed_at=NOW - timedelta(days=2),
            ),
            make_application(
                company_id=company,
                job_id=busy_job,
                status=ApplicationStatus.REJECTED,
                score=40,
                applied_at=NOW - timedelta(days=3),
            ),
            make_application(company_id=company, job_id=quiet_job, applied_at=NOW - timedelta(days=1)),
            make_application(company_id=company, job_id=quiet_job, applied_at=NOW - timedelta(days=90)),
            make_application(job_id=busy_job, applied_at=NOW),
        ]
        rows = aggregator.job_analytics(
            apps, company_id=company, job_titles={str(busy_job): "Backend Engineer"}, now=NOW
        )
        assert [row.job_id for row in rows] == [str(busy_job), str(quiet_job)]
        busy = rows[0]
        assert busy.job_title == "Backend Engineer"
        assert busy.total_applications == 2
        assert {b.status: b.count for b in busy.by_status} == {"pending": 1, "rejected": 1}
        assert busy.avg_response_days == 2.0
        assert rows[1].total_applications == 1
        assert rows[1].avg_response_days is None

    def test_inverted_range(self, aggregator, make_application):
        rows = aggregator.job_analytics(
            [make_application()], start=NOW, end=NOW - timedelta(days=1)
        )
        assert rows == []
