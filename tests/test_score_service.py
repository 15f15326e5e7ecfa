from types import SimpleNamespace

from teacher_eval.services import score_service


def evaluation(teacher_id, values, criteria_ids=None, name=None):
    criteria_ids = criteria_ids or [1] * len(values)
    scores = [
        SimpleNamespace(score_value=v, question_id=i + 1, question=SimpleNamespace(criteria_id=c, criteria=None, description=None))
        for i, (v, c) in enumerate(zip(values, criteria_ids))
    ]
    return SimpleNamespace(
        teacher_id=teacher_id,
        teacher=SimpleNamespace(full_name=name or f"Teacher {teacher_id}"),
        scores=scores,
    )


def test_evaluation_average():
    assert score_service.evaluation_average(evaluation(1, [2, 4, 3, 5])) == 3.5


def test_empty_evaluation_averages_to_zero():
    assert score_service.evaluation_average(evaluation(1, [])) == 0
    assert score_service.criteria_average(evaluation(1, []), 1) == 0


def test_criteria_average_uses_only_that_criteria():
    e = evaluation(1, [2, 4, 3, 5], criteria_ids=[1, 1, 2, 2])
    assert score_service.criteria_average(e, 1) == 3.0
    assert score_service.criteria_average(e, 2) == 4.0
    assert score_service.criteria_average(e, 3) == 0


def test_rank_teachers_averages_evaluation_averages():
    ranked = score_service.rank_teachers([
        evaluation(1, [5, 5]),
        evaluation(2, [3, 3]),
        evaluation(1, [3, 3]),
        evaluation(3, [5, 4]),
    ])
    assert [(t.teacher_id, t.average_score, t.evaluation_count) for t in ranked] == [
        (3, 4.5, 1),
        (1, 4.0, 2),
        (2, 3.0, 1),
    ]


def test_rank_teachers_keeps_insertion_order_on_ties_and_limits():
    ranked = score_service.rank_teachers(
        [evaluation(7, [4]), evaluation(2, [4]), evaluation(5, [5]), evaluation(9, [4])],
        n=3,
    )
    assert [t.teacher_id for t in ranked] == [5, 7, 2]
