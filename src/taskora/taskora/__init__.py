"""Taskora company dashboard.

Feature packages (auth, users, attendance, tasks, files, ...) each hold a
model, a repository interface with its MySQL implementation, a service and
a thin Flask controller. ``main.create_app`` wires them together.
"""
