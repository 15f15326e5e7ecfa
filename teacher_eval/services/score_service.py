# teacher_eval/services/score_service.py
"""Tính điểm trung bình; chỉ đọc, không ghi."""
from collections import OrderedDict
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from teacher_eval.config import TOP_RATED_LIMIT
from teacher_eval.crud import evaluation_crud
from teacher_eval.models.evaluation_model import Evaluation
from teacher_eval.schemas.evaluation_schema import CriteriaResult, QuestionResult
from teacher_eval.schemas.report_schema import TopRatedTeacher


def _mean(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0
    return sum(values) / len(values)


def evaluation_average(evaluation: Evaluation) -> float:
    """Trung bình điểm của một lượt đánh giá (0 nếu chưa có điểm)."""
    return _mean(score.score_value for score in evaluation.scores)


def criteria_average(evaluation: Evaluation, criteria_id: int) -> float:
    """Trung bình các điểm thuộc câu hỏi của một tiêu chí."""
    return _mean(
        score.score_value
        for score in evaluation.scores
        if score.question is not None and score.question.criteria_id == criteria_id
    )


def criteria_breakdown(evaluation: Evaluation) -> List[CriteriaResult]:
    """Gom điểm theo tiêu chí, giữ thứ tự criteria_id rồi question_id."""
    grouped = OrderedDict()
    scores = sorted(
        evaluation.scores,
        key=lambda s: (s.question.criteria_id if s.question else 0, s.question_id),
    )
    for score in scores:
        criteria = score.question.criteria if score.question else None
        key = criteria.criteria_id if criteria else None
        grouped.setdefault(key, (criteria, []))[1].append(score)

    results = []
    for criteria_id, (criteria, items) in grouped.items():
        results.append(
            CriteriaResult(
                criteria_id=criteria_id,
                criteria_name=criteria.name if criteria else None,
                criteria_average=_mean(s.score_value for s in items),
                questions=[
                    QuestionResult(
                        question_id=s.question_id,
                        description=s.question.description if s.question else None,
                        score_value=s.score_value,
                    )
                    for s in items
                ],
            )
        )
    return results


def rank_teachers(evaluations: List[Evaluation], n: Optional[int] = None) -> List[TopRatedTeacher]:
    """
    Gom evaluations theo giáo viên, lấy trung bình của evaluation_average,
    sắp xếp giảm dần; bằng điểm thì giữ thứ tự xuất hiện (sort ổn định).
    """
    groups = OrderedDict()
    for evaluation in evaluations:
        groups.setdefault(evaluation.teacher_id, []).append(evaluation)

    averages = [(teacher_id, items, _mean(evaluation_average(e) for e in items)) for teacher_id, items in groups.items()]
    averages.sort(key=lambda row: row[2], reverse=True)
    if n is not None:
        averages = averages[:n]
    return [
        TopRatedTeacher(
            teacher_id=teacher_id,
            teacher_name=items[0].teacher.full_name if items[0].teacher else None,
            average_score=round(avg, 2),
            evaluation_count=len(items),
        )
        for teacher_id, items, avg in averages
    ]


def top_rated(db: Session, period_id: int, n: int = TOP_RATED_LIMIT) -> List[TopRatedTeacher]:
    return rank_teachers(evaluation_crud.get_period_evaluations(db, period_id), n)
