"""
MedPal core: password authentication with signed session tokens, and
medicine/appointment reminders delivered over SMS and email.
"""

__version__ = "0.1.0"
