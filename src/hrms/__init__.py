"""HRMS timesheet package.

Organized by feature modules (timesheets, reports, users) with a thin Flask
controller layer over service and repository layers.
"""
