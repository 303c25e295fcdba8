from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import api_response, current_user_id, json_body, login_required
from ..core.exceptions import ValidationError
from ..container import Container
from .model import API_FIELD_NAMES, DEDUCTION_FIELDS, EARNING_FIELDS


def _to_attributes(data: dict) -> dict:
    """camelCase wire names -> attribute names; unknown keys are kept for validation."""
    return {API_FIELD_NAMES.get(k, k): v for k, v in data.items()}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payrolls", methods=["POST"], endpoint="create_payroll")
    @login_required
    def create_payroll():
        data = _to_attributes(json_body())
        payroll = container.payroll_service.create_payroll(
            employee_id=data.get("employee_id"),
            labour_card=data.get("labour_card"),
            labour_card_personal_no=data.get("labour_card_personal_no"),
            components={k: data[k] for k in EARNING_FIELDS + DEDUCTION_FIELDS if k in data},
            remark=data.get("remark"),
            created_by=current_user_id(),
        )
        return api_response(payroll.to_dict(), "Payroll created successfully", 201)

    @app.route("/api/payrolls", methods=["GET"], endpoint="list_payrolls")
    @login_required
    def list_payrolls():
        args = request.args
        page = container.payroll_service.list_payrolls(
            employee_id=args.get("employee"),
            period=args.get("period"),
            labour_card=args.get("labourCard"),
            labour_card_personal_no=args.get("labourCardPersonalNo"),
            month=args.get("month"),
            year=args.get("year"),
            start=parse_iso_date(args["startDate"]) if args.get("startDate") else None,
            end=parse_iso_date(args["endDate"]) if args.get("endDate") else None,
            page=args.get("page", 1),
            limit=args.get("limit"),
        )
        return api_response(page.to_dict(), "Payrolls retrieved successfully")

    @app.route("/api/payrolls/report", methods=["GET"], endpoint="payroll_report")
    @login_required
    def payroll_report():
        month = request.args.get("month")
        year = request.args.get("year")
        if not month or not year:
            raise ValidationError("Month and year are required")
        report = container.payroll_report_service.build_payroll_report(month, year)
        message = "Payroll data fetched successfully" if report.total_employees else "No payroll data found for this period"
        return api_response(report.to_dict(), message)

    @app.route("/api/payrolls/<int:payroll_id>", methods=["GET"], endpoint="get_payroll")
    @login_required
    def get_payroll(payroll_id: int):
        payroll = container.payroll_service.get_payroll(payroll_id)
        return api_response(payroll.to_dict(), "Payroll retrieved successfully")

    @app.route("/api/payrolls/<int:payroll_id>", methods=["PATCH", "PUT"], endpoint="update_payroll")
    @login_required
    def update_payroll(payroll_id: int):
        payroll = container.payroll_service.update_payroll(payroll_id, _to_attributes(json_body()))
        return api_response(payroll.to_dict(), "Payroll updated successfully")

    @app.route("/api/payrolls/<int:payroll_id>", methods=["DELETE"], endpoint="delete_payroll")
    @login_required
    def delete_payroll(payroll_id: int):
        container.payroll_service.delete_payroll(payroll_id)
        return api_response(None, "Payroll deleted successfully")

    @app.route("/api/employees/<int:employee_id>/overtime", methods=["GET"], endpoint="employee_overtime")
    @login_required
    def employee_overtime(employee_id: int):
        summary = container.payroll_report_service.get_employee_overtime_summary(employee_id)
        return api_response(summary.to_dict(), "Employee summary retrieved successfully")
