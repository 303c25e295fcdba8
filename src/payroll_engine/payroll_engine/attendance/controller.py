from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import api_response, as_bool, current_user_id, json_body, login_required
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="record_attendance")
    @login_required
    def record_attendance():
        data = json_body()
        if not data.get("date"):
            raise ValidationError("User ID and date are required")

        record = container.attendance_service.record_attendance(
            employee_id=data.get("userId") or data.get("employee"),
            work_date=parse_iso_date(str(data["date"])),
            present=as_bool(data.get("present")),
            is_paid_leave=as_bool(data.get("isPaidLeave")),
            working_hours=data.get("workingHours", 0),
            type=data.get("type") or "normal",
            project_id=data.get("projectId") or None,
            marked_by=current_user_id(),
        )
        return api_response(record.to_dict(), "Attendance saved successfully")

    @app.route("/api/attendance/<int:employee_id>/day", methods=["GET"], endpoint="employee_day_attendance")
    @login_required
    def employee_day_attendance(employee_id: int):
        date_s = request.args.get("date")
        if not date_s:
            raise ValidationError("User ID and date are required")
        records = container.attendance_service.get_day_records(employee_id, parse_iso_date(date_s))
        return api_response([r.to_dict() for r in records], "Attendance records retrieved successfully")

    @app.route("/api/attendance/records/<int:attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    @login_required
    def delete_attendance(attendance_id: int):
        container.attendance_service.delete_record(attendance_id)
        return api_response(None, "Attendance record deleted successfully")

    @app.route("/api/attendance/<int:employee_id>/summary", methods=["GET"], endpoint="attendance_summary")
    @login_required
    def attendance_summary(employee_id: int):
        month = request.args.get("month")
        year = request.args.get("year")
        if not month or not year:
            raise ValidationError("Month and year are required")
        summary = container.payroll_report_service.get_attendance_summary(employee_id, month, year)
        return api_response(summary.to_dict(), "Monthly attendance retrieved successfully")
