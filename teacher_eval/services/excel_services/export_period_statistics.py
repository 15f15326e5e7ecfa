from io import BytesIO

from fastapi.responses import StreamingResponse
from openpyxl import Workbook  # type: ignore
from openpyxl.utils import get_column_letter  # type: ignore
from sqlalchemy.orm import Session

from teacher_eval.services.report_service import period_statistics


def export_period_statistics(db: Session, period_id: int):
    """
    Xuất thống kê kỳ đánh giá ra Excel:
    - A1: tên kỳ
    - A3-B8: các chỉ số tổng hợp
    - A10-D10: header bảng giáo viên được đánh giá cao nhất
    """
    stats = period_statistics(db, period_id)

    wb = Workbook()
    ws = wb.active
    ws.title = "Statistics"

    ws["A1"] = f"Evaluation period: {stats.period_name}"

    summary_rows = [
        ("Total evaluations", stats.total_evaluations),
        ("Unique students", stats.unique_students),
        ("Unique teachers", stats.unique_teachers),
        ("Average score", stats.average_score),
        ("Anonymous evaluations", stats.anonymous_count),
    ]
    for offset, (label, value) in enumerate(summary_rows):
        ws.cell(row=3 + offset, column=1, value=label)
        ws.cell(row=3 + offset, column=2, value=value)

    header_row = 4 + len(summary_rows)
    for col, title in enumerate(["Rank", "Teacher", "Average score", "Evaluations"], start=1):
        ws.cell(row=header_row, column=col, value=title)

    for rank, teacher in enumerate(stats.top_rated_teachers, start=1):
        ws.cell(row=header_row + rank, column=1, value=rank)
        ws.cell(row=header_row + rank, column=2, value=teacher.teacher_name)
        ws.cell(row=header_row + rank, column=3, value=teacher.average_score)
        ws.cell(row=header_row + rank, column=4, value=teacher.evaluation_count)

    # Tự chỉnh độ rộng cột theo nội dung
    for col in range(1, ws.max_column + 1):
        col_letter = get_column_letter(col)
        max_length = max((len(str(cell.value)) for cell in ws[col_letter] if cell.value is not None), default=0)
        ws.column_dimensions[col_letter].width = max_length + 2

    stream = BytesIO()
    wb.save(stream)
    stream.seek(0)

    filename = f"evaluation_period_{period_id}_statistics.xlsx"
    headers = {"Content-Disposition": f"attachment; filename={filename}"}
    return StreamingResponse(
        stream,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers=headers,
    )
