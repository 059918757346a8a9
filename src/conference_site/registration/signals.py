"""Custom signals for the registration app.

Signals:
    registration_created: Sent after a new registration and its attendees
        are committed.
        Sender: The ``Registration`` class.
        Kwargs:
            registration: The ``Registration`` instance that was created.
"""

from django.dispatch import Signal

registration_created = Signal()
