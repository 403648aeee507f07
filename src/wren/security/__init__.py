"""Security collaborators.

CSRF protection::

    from wren.security import CSRF

    csrf = CSRF(secret_key="...")
    token = csrf.generate_token()
    csrf.is_valid(token)  # True
"""

from wren.security.csrf import CSRF, CSRFConfig

__all__ = ["CSRF", "CSRFConfig"]
