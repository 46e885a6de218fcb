"""Crew Board package.

Shift scheduling, attendance and payroll for a multi-branch crew operation.
Organized by feature modules (employees, schedules, attendance, requests,
payroll, ...) with a thin Flask controller layer over service/repository layers.
"""
