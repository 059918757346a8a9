"""Custom signals for the payments app.

Signals:
    payment_recorded: Sent when a completed checkout session is stored.
        Sender: The ``Payment`` class.
        Kwargs:
            payment: The ``Payment`` instance.
            created: ``False`` when the session had already been recorded.
"""

from django.dispatch import Signal

payment_recorded = Signal()
