"""Reminder notifications: templates, multi-channel dispatcher and metrics.

The dispatcher renders one message per requested channel and hands it to the
SMS and email senders in ``medpal.services``.
"""
