"""Custom branding images for a host web application.

Operators upload replacement icon / banner images which are kept in a small
override store and either pushed onto the host's static web bundle or served
in place of the bundle assets by a request hook. The host integrates through
``custom_logo.startup.wiring.init_app``.
"""

__all__ = [
]
