"""Training Attendance package.

Feature modules (domains, batches, users, sessions, attendance, reports) each
carry a model, a repository interface, a MySQL repository, a service and a
thin Flask controller.
"""
