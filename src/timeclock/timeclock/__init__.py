"""Timeclock package.

Feature modules (employees, ledger, payroll, stats) each carry a model,
a repository interface, concrete repositories and a service layer.
Flask controllers stay thin and only translate HTTP to service calls.
"""
