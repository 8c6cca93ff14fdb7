"""
Portal API – admin export of all reviewable content.
"""
import re
from datetime import datetime, timezone
from io import BytesIO

from django.http import HttpResponse
from django.views.decorators.http import require_GET

from core.utils.audit import log_action
from core.utils.http import api_login_required

from .content import merged_content
from .permissions import require_admin

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

HEADERS = [
    'Type', 'ID', 'Title / Question', 'Writer', 'Writer Email', 'Category',
    'Subject', 'Topic', 'Status', 'Total Marks', 'Rejection Reason', 'Created (UTC)',
]

STATUS_FILLS = {
    'approved': ('C6EFCE', '006100'),
    'rejected': ('FFC7CE', '9C0006'),
    'pending': ('FFEB9C', '9C5700'),
}


def _safe_filename(name: str) -> str:
    """Sanitize a string for safe use in Content-Disposition headers."""
    return re.sub(r'[^\w\-.]', '_', name)


def _format_timestamp(value):
    if not value:
        return ''
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime('%Y-%m-%d %H:%M')


def _row(item):
    headline = getattr(item, 'title', '') or getattr(item, 'question', '')
    writer = item.writer
    return [
        item.CONTENT_TYPE,
        item.id,
        headline,
        writer.name if writer else '',
        writer.email if writer else '',
        item.category,
        item.subject,
        item.topic,
        item.status,
        getattr(item, 'total_marks', ''),
        item.rejection_reason,
        _format_timestamp(item.created_at),
    ]


@api_login_required
@require_GET
def export_submissions_xlsx(request):
    """GET /api/admin/reports/submissions.xlsx – same filters as /api/admin/submissions"""
    from openpyxl import Workbook
    from openpyxl.styles import Alignment, Font, PatternFill
    from openpyxl.utils import get_column_letter

    caller = require_admin(request)
    items = merged_content(caller, request.GET)

    wb = Workbook()
    ws = wb.active
    ws.title = 'Submissions'

    header_fill = PatternFill(start_color='4472C4', end_color='4472C4', fill_type='solid')
    header_font = Font(bold=True, color='FFFFFF', size=11)
    header_alignment = Alignment(horizontal='center', vertical='center')

    last_col_letter = get_column_letter(len(HEADERS))
    ws.merge_cells(f'A1:{last_col_letter}1')
    ws['A1'] = 'MeduAid QB Portal - Submissions'
    ws['A1'].font = Font(bold=True, size=14)
    ws['A1'].alignment = Alignment(horizontal='center')

    ws.merge_cells(f'A2:{last_col_letter}2')
    ws['A2'] = f"Generated on: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')} UTC"
    ws['A2'].alignment = Alignment(horizontal='center')

    for col_num, header in enumerate(HEADERS, 1):
        cell = ws.cell(row=4, column=col_num)
        cell.value = header
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = header_alignment

    status_col = HEADERS.index('Status') + 1
    for row_num, item in enumerate(items, 5):
        for col_idx, value in enumerate(_row(item), 1):
            cell = ws.cell(row=row_num, column=col_idx)
            cell.value = value
            cell.alignment = Alignment(horizontal='left', vertical='top', wrap_text=True)

        # Color-code review status
        colors = STATUS_FILLS.get(item.status)
        if colors:
            status_cell = ws.cell(row=row_num, column=status_col)
            status_cell.fill = PatternFill(start_color=colors[0], end_color=colors[0], fill_type='solid')
            status_cell.font = Font(color=colors[1], bold=True)

    # Auto-adjust column widths
    for col_idx in range(1, len(HEADERS) + 1):
        col_letter = get_column_letter(col_idx)
        max_len = max(
            (len(str(cell.value)) for cell in ws[col_letter][3:] if cell.value is not None),
            default=10,
        )
        ws.column_dimensions[col_letter].width = min(max_len + 2, 50)

    buf = BytesIO()
    wb.save(buf)
    buf.seek(0)

    log_action(request, 'EXPORT', 'Submission', '', f'Exported {len(items)} submissions to XLSX')

    stamp = datetime.now(timezone.utc).strftime('%Y%m%d')
    filename = _safe_filename(f'meduaid_submissions_{stamp}.xlsx')
    response = HttpResponse(buf.getvalue(), content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
