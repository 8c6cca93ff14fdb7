"""Portal API URLs – all JSON endpoints under /api/."""
from django.urls import path

from .api import dashboard, notifications, penalties, reports, stations, submissions

app_name = 'portal_api'

urlpatterns = [
    # ── OSCE stations ────────────────────────────────────────────────────────
    path('osce-stations/', stations.stations_collection, name='stations'),
    path('osce-stations/<int:station_id>', stations.station_detail, name='station_detail'),

    # ── SBA submissions ──────────────────────────────────────────────────────
    path('submissions/', submissions.submissions_collection, name='submissions'),
    path('submissions/<int:submission_id>', submissions.submission_detail, name='submission_detail'),

    # ── Admin ────────────────────────────────────────────────────────────────
    path('admin/stats', dashboard.admin_stats, name='admin_stats'),
    path('admin/submissions', dashboard.all_submissions, name='admin_submissions'),
    path('admin/writers', dashboard.get_writers, name='admin_writers'),
    path('admin/penalties', penalties.admin_penalties, name='admin_penalties'),
    path('admin/penalties/<int:penalty_id>', penalties.delete_penalty, name='delete_penalty'),
    path('admin/reports/submissions.xlsx', reports.export_submissions_xlsx, name='export_submissions_xlsx'),

    # ── Writer ───────────────────────────────────────────────────────────────
    path('writer/stats', dashboard.writer_stats, name='writer_stats'),
    path('writer/penalties', penalties.writer_penalties, name='writer_penalties'),
    path('writer/notifications', notifications.get_notifications, name='notifications'),
    path('writer/notifications/<int:notification_id>/read', notifications.mark_notification_read,
         name='mark_notification_read'),
]
