"""Users app package.

Defines the email-login user model and the role-gated access checker.
Use ``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout
the project and ``apps.users.access.access_checker`` for capability checks.
"""
