from datetime import date

from conftest import make_period
from teacher_eval.models import Evaluation, Score
from teacher_eval.schemas.evaluation_schema import EligibilityStatus
from teacher_eval.services import eligibility_service

IN_PERIOD = date(2025, 4, 1)


def add_evaluation(db, seed, period, subject, teacher):
    db.add(Evaluation(
        evaluation_period_id=period.evaluation_period_id,
        subject_id=subject.subject_id,
        teacher_id=teacher.teacher_id,
        student_id=seed.student1.user_id,
        scores=[Score(question_id=seed.question_ids[0], score_value=5)],
    ))
    db.commit()


def test_no_active_period_is_distinct_from_completed(db, seed):
    result = eligibility_service.resolve_eligibility(db, seed.student1.user_id)

    assert result.status == EligibilityStatus.no_active_period
    assert result.has_active_period is False
    assert result.candidates == []


def test_inactive_teachers_are_excluded(db, seed):
    make_period(db, "Sem1 2025", date(2025, 3, 1), date(2025, 6, 1), current=True)

    result = eligibility_service.resolve_eligibility(db, seed.student1.user_id, today=IN_PERIOD)

    pairs = {(c.teacher_id, c.subject_id) for c in result.candidates}
    assert pairs == {
        (seed.santos.teacher_id, seed.it101.subject_id),
        (seed.reyes.teacher_id, seed.it102.subject_id),
    }
    assert result.status == EligibilityStatus.pending
    assert result.can_submit is True
    assert result.total_enrolled == 2
    assert result.progress_percentage == 0


def test_evaluations_from_other_periods_do_not_count(db, seed):
    old = make_period(db, "Sem2 2024", date(2024, 8, 1), date(2024, 12, 1))
    make_period(db, "Sem1 2025", date(2025, 3, 1), date(2025, 6, 1), current=True)
    add_evaluation(db, seed, old, seed.it101, seed.santos)

    result = eligibility_service.resolve_eligibility(db, seed.student1.user_id, today=IN_PERIOD)

    assert len(result.candidates) == 2
    assert result.total_evaluated == 0


def test_completed_when_every_pair_is_evaluated(db, seed):
    period = make_period(db, "Sem1 2025", date(2025, 3, 1), date(2025, 6, 1), current=True)
    add_evaluation(db, seed, period, seed.it101, seed.santos)
    add_evaluation(db, seed, period, seed.it102, seed.reyes)

    result = eligibility_service.resolve_eligibility(db, seed.student1.user_id, today=IN_PERIOD)

    assert result.status == EligibilityStatus.completed
    assert result.candidates == []
    assert result.total_evaluated == 2
    assert result.total_remaining == 0
    assert result.progress_percentage == 100


def test_not_enrolled_student(db, seed):
    make_period(db, "Sem1 2025", date(2025, 3, 1), date(2025, 6, 1), current=True)

    result = eligibility_service.resolve_eligibility(db, seed.student2.user_id, today=IN_PERIOD)

    assert result.status == EligibilityStatus.not_enrolled
    assert result.has_active_period is True


def test_candidates_listed_outside_window_but_cannot_submit(db, seed):
    make_period(db, "Sem1 2025", date(2025, 3, 1), date(2025, 6, 1), current=True)

    result = eligibility_service.resolve_eligibility(db, seed.student1.user_id, today=date(2025, 7, 1))

    assert result.status == EligibilityStatus.pending
    assert result.can_submit is False
