"""Shift calendar sync.

Copies upcoming shifts from the Sling scheduling API into Google Calendar,
one event per shift, and reports each outcome to a Discord webhook.
"""

__version__ = "0.1.0"
