"""
Application lifecycle state machine.

Owns every mutation of an Application: status transitions, soft view
tracking, notes, communications, withdrawal and score recording. Each
operation validates first and mutates second, so a rejected call leaves the
entity exactly as it was. Every change is appended to the timeline and
written to the audit log.

The lifecycle performs no locking. Callers persist the mutated entity with
a conditional write (see ApplicationRepository.save) and retry or reject on
conflict.
"""

from datetime import datetime
from typing import Any, Callable, Optional, Union

from talentmatch.core.exceptions import ForbiddenError, InvalidTransitionError
from talentmatch.data.models import (
    Application,
    CommunicationEntry,
    InterviewDetails,
    MatchResult,
    NoteEntry,
    SubmissionContext,
    TimelineEntry,
    ViewRecord,
    utc_now,
)
from talentmatch.utils.constants import (
    ALLOWED_TRANSITIONS,
    STATUS_SIDE_ENTRIES,
    WITHDRAWABLE_STATUSES,
    ApplicationStatus,
    AuditAction,
    TimelineAction,
)
from talentmatch.utils.logger import LoggerMixin, audit_log

StatusArg = Union[ApplicationStatus, str]


def _parse_status(value: StatusArg) -> Optional[ApplicationStatus]:
    """Return the matching status, or None for anything unrecognized."""
    if isinstance(value, ApplicationStatus):
        return value
    if not isinstance(value, str):
        return None
    try:
        return ApplicationStatus(value.strip().lower())
    except ValueError:
        return None


def _clamp_percent(value: Any) -> int:
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError):
        return 0
    return min(100, max(0, number))


class ApplicationLifecycle(LoggerMixin):
    """
    State machine over Application.status.

    Stateless apart from its clock, which tests replace with a fixed one.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the lifecycle.

        Args:
            clock: Zero-argument callable returning the current naive UTC time
        """
        self._clock = clock or utc_now

    # -------------------------------------------------------------------------
    # Transition table
    # -------------------------------------------------------------------------

    @staticmethod
    def allowed_targets(status: StatusArg) -> frozenset[ApplicationStatus]:
        """Statuses reachable in one step from the given one."""
        current = _parse_status(status)
        if current is None:
            return frozenset()
        return ALLOWED_TRANSITIONS[current]

    @classmethod
    def can_transition(cls, current: StatusArg, target: StatusArg) -> bool:
        parsed = _parse_status(target)
        return parsed is not None and parsed in cls.allowed_targets(current)

    def _require_transition(self, app: Application, target: StatusArg) -> ApplicationStatus:
        """Validate a transition without touching the application."""
        current = app.current_status
        parsed = _parse_status(target)
        if parsed is None:
            raise InvalidTransitionError(current, target, "unrecognized status")
        if parsed not in ALLOWED_TRANSITIONS[current]:
            reason = "application is in a terminal state" if current.is_terminal else None
            raise InvalidTransitionError(current, parsed, reason)
        return parsed

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def create(self, submission: Union[SubmissionContext, dict[str, Any]]) -> Application:
        """
        Create a new application from a submission.

        Args:
            submission: Submission context (or its dict form)

        Returns:
            Application in ``pending`` with a single ``applied`` timeline entry
        """
        if not isinstance(submission, SubmissionContext):
            submission = SubmissionContext.model_validate(submission)

        now = submission.applied_at or self._clock()
        data = submission.model_dump(exclude={"applicant", "applied_at"})
        if submission.applicant is not None:
            data["applicant_snapshot"] = submission.applicant

        application = Application(
            **data,
            status=ApplicationStatus.PENDING,
            applied_at=now,
            created_at=now,
            updated_at=now,
            timeline=[
                TimelineEntry(
                    action=TimelineAction.APPLIED,
                    performed_by=str(submission.applicant_id),
                    notes="Application submitted",
                    timestamp=now,
                )
            ],
        )

        audit_log(
            AuditAction.APPLICATION_CREATED.value,
            {
                "job_id": str(application.job_id),
                "company_id": str(application.company_id),
                "applicant_id": str(application.applicant_id),
            },
        )
        return application

    # -------------------------------------------------------------------------
    # Status changes
    # -------------------------------------------------------------------------

    def set_status(
        self,
        app: Application,
        new_status: StatusArg,
        acting_user: Any,
        notes: Optional[str] = None,
        rejection_reason: Optional[str] = None,
        interview: Union[InterviewDetails, dict[str, Any], None] = None,
    ) -> TimelineEntry:
        """
        Move an application to a new status.

        Appends one ``status_updated`` entry, followed by an
        ``interview_scheduled``, ``accepted`` or ``rejected`` entry when the
        target calls for one.

        Args:
            app: Application to update
            new_status: Target status
            acting_user: Identity of the staff member making the change
            notes: Optional timeline note, defaults to a generated description
            rejection_reason: Stored only when moving to ``rejected``
            interview: Interview details merged only when moving to ``interview``

        Returns:
            The ``status_updated`` timeline entry

        Raises:
            InvalidTransitionError: If the target is unknown or not reachable
        """
        target = self._require_transition(app, new_status)
        if interview is not None and not isinstance(interview, InterviewDetails):
            interview = InterviewDetails.model_validate(interview)

        now = self._clock()
        user = str(acting_user)
        previous = app.current_status

        app.status = target.value
        entry = TimelineEntry(
            action=TimelineAction.STATUS_UPDATED,
            performed_by=user,
            notes=notes or f"Status changed from {previous.value} to {target.value}",
            timestamp=now,
            previous_status=previous,
            new_status=target,
        )
        app.timeline.append(entry)

        if target is ApplicationStatus.REVIEWED:
            if app.viewed_at is None:
                app.viewed_at = now
            app.last_viewed_at = now
            self._add_viewer(app, user, now)

        side_entry = STATUS_SIDE_ENTRIES.get(target)
        if side_entry is not None:
            action, side_note = side_entry
            app.timeline.append(
                TimelineEntry(action=action, performed_by=user, notes=side_note, timestamp=now)
            )

        if target is ApplicationStatus.REJECTED and rejection_reason:
            app.rejection_reason = rejection_reason

        if target is ApplicationStatus.INTERVIEW and interview is not None:
            app.interview = self._merge_interview(app.interview, interview)

        app.updated_at = now

        self.logger.info(f"Application {app.id} moved {previous.value} -> {target.value}")
        audit_log(
            AuditAction.STATUS_CHANGED.value,
            {
                "application_id": str(app.id),
                "previous_status": previous.value,
                "new_status": target.value,
                "performed_by": user,
            },
        )
        return entry

    def withdraw(self, app: Application, applicant: Any) -> Application:
        """
        Withdraw an application on behalf of its applicant.

        Raises:
            ForbiddenError: If the caller is not the original applicant
            InvalidTransitionError: If the application is already final
        """
        user = str(applicant)
        if user != str(app.applicant_id):
            raise ForbiddenError(user, "withdraw this application")

        previous = app.current_status
        if previous not in WITHDRAWABLE_STATUSES:
            raise InvalidTransitionError(
                previous, ApplicationStatus.WITHDRAWN, "application is in a terminal state"
            )

        now = self._clock()
        app.status = ApplicationStatus.WITHDRAWN.value
        app.timeline.append(
            TimelineEntry(
                action=TimelineAction.WITHDRAWN,
                performed_by=user,
                notes="Application withdrawn by applicant",
                timestamp=now,
                previous_status=previous,
                new_status=ApplicationStatus.WITHDRAWN,
            )
        )
        app.notes.append(
            NoteEntry(text="Application withdrawn by the applicant", author=user, added_at=now)
        )
        app.updated_at = now

        audit_log(
            AuditAction.APPLICATION_WITHDRAWN.value,
            {"application_id": str(app.id), "previous_status": previous.value},
        )
        return app

    # -------------------------------------------------------------------------
    # View tracking
    # -------------------------------------------------------------------------

    def mark_viewed(self, app: Application, viewing_user: Any) -> Application:
        """
        Record that a user opened the application.

        The first view stamps ``viewed_at`` and, for a pending application,
        moves it to ``reviewed``. Later views only refresh ``last_viewed_at``
        and add the viewer if they are new.
        """
        now = self._clock()
        user = str(viewing_user)

        first_view = app.viewed_at is None
        previous = app.current_status
        promoted = first_view and previous is ApplicationStatus.PENDING

        if first_view:
            app.viewed_at = now
        app.last_viewed_at = now
        self._add_viewer(app, user, now)

        if first_view:
            if promoted:
                app.status = ApplicationStatus.REVIEWED.value
            app.timeline.append(
                TimelineEntry(
                    action=TimelineAction.REVIEWED,
                    performed_by=user,
                    notes="Application viewed",
                    timestamp=now,
                    previous_status=previous if promoted else None,
                    new_status=ApplicationStatus.REVIEWED if promoted else None,
                )
            )
        app.updated_at = now

        audit_log(
            AuditAction.APPLICATION_VIEWED.value,
            {
                "application_id": str(app.id),
                "viewed_by": user,
                "first_view": first_view,
                "promoted": promoted,
            },
            audit_type="ACCESS",
        )
        return app

    @staticmethod
    def _add_viewer(app: Application, user: str, now: datetime) -> None:
        if not app.has_viewer(user):
            app.viewed_by.append(ViewRecord(user=user, viewed_at=now))

    # -------------------------------------------------------------------------
    # Notes and communications
    # -------------------------------------------------------------------------

    def add_note(self, app: Application, text: str, author: Any) -> NoteEntry:
        """Append an internal note and its ``note_added`` timeline entry."""
        now = self._clock()
        note = NoteEntry(text=text, author=str(author), added_at=now)

        app.notes.append(note)
        app.timeline.append(
            TimelineEntry(
                action=TimelineAction.NOTE_ADDED,
                performed_by=str(author),
                notes="Note added to application",
                timestamp=now,
            )
        )
        app.updated_at = now

        audit_log(AuditAction.NOTE_ADDED.value, {"application_id": str(app.id), "author": str(author)})
        return note

    def add_communication(
        self,
        app: Application,
        type: str,
        subject: str,
        body: str,
        author: Any,
    ) -> CommunicationEntry:
        """
        Log a communication with the applicant.

        Args:
            app: Application the communication belongs to
            type: Channel (email, message or call)
            subject: Subject line
            body: Message body
            author: Identity of the sender

        Returns:
            The stored communication entry
        """
        now = self._clock()
        entry = CommunicationEntry(type=type, subject=subject, body=body, author=str(author), sent_at=now)

        app.communications.append(entry)
        app.timeline.append(
            TimelineEntry(
                action=TimelineAction.COMMUNICATION_SENT,
                performed_by=str(author),
                notes=f"{entry.type} communication sent: {subject}",
                timestamp=now,
            )
        )
        app.updated_at = now

        audit_log(
            AuditAction.COMMUNICATION_SENT.value,
            {"application_id": str(app.id), "type": entry.type, "author": str(author)},
        )
        return entry

    # -------------------------------------------------------------------------
    # Scores and interviews
    # -------------------------------------------------------------------------

    def record_match(self, app: Application, result: Union[MatchResult, dict[str, Any]]) -> Application:
        """Store a MatchScorer result on the application, clamped to 0-100."""
        if isinstance(result, MatchResult):
            score, skills_match = result.score, result.skills_match
        else:
            score = result.get("score", 0)
            skills_match = result.get("skills_match", result.get("skillsMatch", 0))

        app.score = _clamp_percent(score)
        app.skills_match = _clamp_percent(skills_match)
        app.updated_at = self._clock()

        audit_log(
            AuditAction.APPLICATION_SCORED.value,
            {"application_id": str(app.id), "score": app.score, "skills_match": app.skills_match},
            audit_type="SCORING",
        )
        return app

    def record_interview_feedback(
        self,
        app: Application,
        acting_user: Any,
        feedback: str,
        rating: Optional[int] = None,
    ) -> TimelineEntry:
        """
        Record the outcome of the interview.

        Raises:
            InvalidTransitionError: If the application is not in ``interview``
        """
        current = app.current_status
        if current is not ApplicationStatus.INTERVIEW:
            raise InvalidTransitionError(
                current, TimelineAction.INTERVIEW_COMPLETED, "no interview in progress"
            )
        update = InterviewDetails(feedback=feedback, rating=rating)

        now = self._clock()
        user = str(acting_user)
        app.interview = self._merge_interview(app.interview, update)
        entry = TimelineEntry(
            action=TimelineAction.INTERVIEW_COMPLETED,
            performed_by=user,
            notes=feedback or "Interview completed",
            timestamp=now,
        )
        app.timeline.append(entry)
        app.updated_at = now

        audit_log(
            AuditAction.INTERVIEW_COMPLETED.value,
            {"application_id": str(app.id), "performed_by": user, "rating": rating},
        )
        return entry

    @staticmethod
    def _merge_interview(
        existing: Optional[InterviewDetails], update: InterviewDetails
    ) -> InterviewDetails:
        merged = existing.model_dump(exclude_none=True) if existing else {}
        merged.update(update.model_dump(exclude_none=True))
        return InterviewDetails(**merged)


# Singleton instance
_lifecycle: Optional[ApplicationLifecycle] = None


def get_application_lifecycle() -> ApplicationLifecycle:
    """Get the application lifecycle singleton instance."""
    global _lifecycle
    if _lifecycle is None:
        _lifecycle = ApplicationLifecycle()
    return _lifecycle
