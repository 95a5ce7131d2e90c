"""Attendance & payroll rule engine.

Organized by feature modules (punches, shifts, attendance, payroll, ...) with
pure service/calculator layers on top of repository protocols.
"""
