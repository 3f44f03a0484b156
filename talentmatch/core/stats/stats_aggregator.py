"""
Application statistics aggregator.

Folds a collection of applications into dashboard read models: counts and
averages per status, view rate, daily and monthly submission series, top
candidate rankings and per-job analytics. Every function here is a pure
recomputation over its input; nothing is cached or mutated.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional, Union

from pydantic import ValidationError

from talentmatch.core.matching import round_half_up
from talentmatch.data.models import (
    Application,
    ApplicationStats,
    JobAnalytics,
    JobStatusBreakdown,
    RankedCandidate,
    StatusStats,
    to_naive_utc,
    utc_now,
)
from talentmatch.utils.config import get_settings
from talentmatch.utils.logger import LoggerMixin

ApplicationLike = Union[Application, dict[str, Any]]


def incremental_mean(previous_mean: float, previous_count: int, value: float) -> float:
    """
    Fold one more observation into a running mean.

    new_mean = previous_mean + (value - previous_mean) / (previous_count + 1)

    Args:
        previous_mean: Mean of the first ``previous_count`` observations
        previous_count: Number of observations already folded in
        value: The new observation

    Returns:
        Mean of ``previous_count + 1`` observations
    """
    if previous_count <= 0:
        return float(value)
    return previous_mean + (value - previous_mean) / (previous_count + 1)


def _mean(values: list[float]) -> float:
    """Arithmetic mean rounded half-up to one decimal, 0.0 when empty."""
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values) * 10) / 10


def _months_back(moment: datetime, months: int) -> datetime:
    """First instant of the calendar month ``months`` before ``moment``'s month."""
    index = moment.year * 12 + (moment.month - 1) - months
    return datetime(index // 12, index % 12 + 1, 1)


class StatsAggregator(LoggerMixin):
    """
    Pure fold from applications to statistics.

    Holds only its window configuration, so one instance can be shared.
    """

    def __init__(
        self,
        daily_window_days: Optional[int] = None,
        monthly_window_months: Optional[int] = None,
        top_candidates_limit: Optional[int] = None,
    ):
        settings = get_settings()
        self.daily_window_days = (
            settings.stats.daily_window_days if daily_window_days is None else daily_window_days
        )
        self.monthly_window_months = (
            settings.stats.monthly_window_months
            if monthly_window_months is None
            else monthly_window_months
        )
        self.top_candidates_limit = (
            settings.stats.top_candidates_limit
            if top_candidates_limit is None
            else top_candidates_limit
        )
        self.score_weight = settings.scoring.top_candidate_score_weight
        self.skills_weight = settings.scoring.top_candidate_skills_weight

    # -------------------------------------------------------------------------
    # Input handling
    # -------------------------------------------------------------------------

    def _coerce(self, applications: Optional[Iterable[ApplicationLike]]) -> list[Application]:
        """Validate raw documents, skipping the ones that cannot be read."""
        result = []
        for item in applications or []:
            if isinstance(item, Application):
                result.append(item)
                continue
            try:
                result.append(Application.model_validate(item))
            except ValidationError as e:
                self.logger.warning(f"Skipping malformed application: {e.error_count()} error(s)")
        return result

    @staticmethod
    def _filter(
        applications: list[Application],
        company_id: Any = None,
        job_id: Any = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Application]:
        selected = []
        for app in applications:
            if company_id is not None and str(app.company_id) != str(company_id):
                continue
            if job_id is not None and str(app.job_id) != str(job_id):
                continue
            if start is not None and app.applied_at < start:
                continue
            if end is not None and app.applied_at > end:
                continue
            selected.append(app)
        return selected

    # -------------------------------------------------------------------------
    # Summary statistics
    # -------------------------------------------------------------------------

    def compute(
        self,
        applications: Optional[Iterable[ApplicationLike]],
        company_id: Any = None,
        job_id: Any = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        window_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ApplicationStats:
        """
        Summarize applications for a dashboard.

        Args:
            applications: Applications (or their document form) to summarize
            company_id: Only count applications for this employer
            job_id: Only count applications for this job
            start: Ignore applications submitted before this moment
            end: Ignore applications submitted after this moment
            window_days: Length of the daily series, defaults to settings
            now: Reference time for the trailing series

        Returns:
            ApplicationStats; an inverted date range yields an empty result
        """
        start, end = to_naive_utc(start), to_naive_utc(end)
        if start is not None and end is not None and start > end:
            self.logger.debug(f"Inverted date range {start} > {end}; returning empty stats")
            return ApplicationStats(period_start=start, period_end=end)

        now = to_naive_utc(now) or utc_now()
        selected = self._filter(self._coerce(applications), company_id, job_id, start, end)
        total = len(selected)
        viewed = sum(1 for app in selected if app.viewed_at is not None)

        groups: dict[str, list[Application]] = defaultdict(list)
        for app in selected:
            groups[app.current_status.value].append(app)

        by_status = {
            status: StatusStats(
                count=len(group),
                avg_score=_mean([app.score for app in group]),
                avg_skills_match=_mean([app.skills_match for app in group]),
                avg_experience=_mean(
                    [app.applicant_snapshot.total_experience_years for app in group]
                ),
            )
            for status, group in sorted(groups.items())
        }

        if window_days is None:
            window_days = self.daily_window_days
        daily_cutoff = now - timedelta(days=window_days)
        daily: dict[str, int] = defaultdict(int)
        monthly_cutoff = _months_back(now, self.monthly_window_months - 1)
        monthly: dict[str, int] = defaultdict(int)
        for app in selected:
            if window_days > 0 and daily_cutoff <= app.applied_at <= now:
                daily[app.applied_at.strftime("%Y-%m-%d")] += 1
            if monthly_cutoff <= app.applied_at <= now:
                monthly[app.applied_at.strftime("%Y-%m")] += 1

        return ApplicationStats(
            total=total,
            viewed=viewed,
            view_rate=round_half_up(viewed / total * 100) if total else 0,
            avg_score=_mean([app.score for app in selected]),
            avg_skills_match=_mean([app.skills_match for app in selected]),
            by_status=by_status,
            daily_counts=dict(sorted(daily.items())),
            monthly_counts=dict(sorted(monthly.items())),
            period_start=start,
            period_end=end,
        )

    # -------------------------------------------------------------------------
    # Rankings and analytics
    # -------------------------------------------------------------------------

    def rank_score(self, app: Application) -> float:
        """Combined ranking score, weighted towards skills match."""
        return round(app.score * self.score_weight + app.skills_match * self.skills_weight, 2)

    def rank_top_candidates(
        self,
        applications: Optional[Iterable[ApplicationLike]],
        job_id: Any = None,
        limit: Optional[int] = None,
    ) -> list[RankedCandidate]:
        """
        Rank applications by combined score and skills match.

        Ties go to the most recent application.
        """
        selected = self._filter(self._coerce(applications), job_id=job_id)
        ranked = sorted(
            selected,
            key=lambda app: (self.rank_score(app), app.applied_at),
            reverse=True,
        )
        return [
            RankedCandidate(
                application_id=str(app.id) if app.id else None,
                applicant_id=str(app.applicant_id),
                name=app.applicant_snapshot.name,
                status=app.current_status.value,
                score=app.score,
                skills_match=app.skills_match,
                rank_score=self.rank_score(app),
                applied_at=app.applied_at,
            )
            for app in ranked[: self.top_candidates_limit if limit is None else limit]
        ]

    def job_analytics(
        self,
        applications: Optional[Iterable[ApplicationLike]],
        company_id: Any = None,
        job_titles: Optional[dict[str, str]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> list[JobAnalytics]:
        """
        Per-job breakdown of an employer's applications.

        Args:
            applications: Applications to analyze
            company_id: Only include this employer's applications
            job_titles: Optional job id -> title lookup for display
            start: Window start, defaults to the daily window before ``end``
            end: Window end, defaults to now
            now: Reference time when ``end`` is omitted

        Returns:
            One row per job, busiest job first
        """
        end = to_naive_utc(end) or to_naive_utc(now) or utc_now()
        start = to_naive_utc(start) or end - timedelta(days=self.daily_window_days)
        if start > end:
            return []

        selected = self._filter(self._coerce(applications), company_id, None, start, end)
        jobs: dict[str, list[Application]] = defaultdict(list)
        for app in selected:
            jobs[str(app.job_id)].append(app)

        titles = job_titles or {}
        rows = []
        for job_id, group in jobs.items():
            by_status: dict[str, list[Application]] = defaultdict(list)
            for app in group:
                by_status[app.current_status.value].append(app)

            response_days = [
                (app.viewed_at - app.applied_at).total_seconds() / 86400
                for app in group
                if app.viewed_at is not None
            ]
            rows.append(
                JobAnalytics(
                    job_id=job_id,
                    job_title=titles.get(job_id),
                    total_applications=len(group),
                    by_status=[
                        JobStatusBreakdown(
                            status=status,
                            count=len(members),
                            avg_score=_mean([app.score for app in members]),
                            avg_skills_match=_mean([app.skills_match for app in members]),
                        )
                        for status, members in sorted(by_status.items())
                    ],
                    avg_response_days=_mean(response_days) if response_days else None,
                )
            )

        rows.sort(key=lambda row: row.total_applications, reverse=True)
        return rows


# Singleton instance
_stats_aggregator: Optional[StatsAggregator] = None


def get_stats_aggregator() -> StatsAggregator:
    """Get the stats aggregator singleton instance."""
    global _stats_aggregator
    if _stats_aggregator is None:
        _stats_aggregator = StatsAggregator()
    return _stats_aggregator


def compute_application_stats(
    applications: Optional[Iterable[ApplicationLike]],
    company_id: Any = None,
    job_id: Any = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    window_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> ApplicationStats:
    """Summarize applications with the shared aggregator."""
    return get_stats_aggregator().compute(
        applications,
        company_id=company_id,
        job_id=job_id,
        start=start,
        end=end,
        window_days=window_days,
        now=now,
    )
