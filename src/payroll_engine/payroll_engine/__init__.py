"""Payroll & Attendance engine package.

Organized by feature modules (attendance, employees, payroll) with a thin Flask
controller layer over service/repository layers.
"""
