"""
Service layer: calendar arithmetic, balance ledger, desired months lock,
validation engine and the approval workflow.
"""
