"""
Notification Module

Fire-and-forget activity events for the matching core.

Usage:
    from notification import ActivityLogger

    activity = ActivityLogger(session_factory)
    activity.log_match_created(user_id, record)
"""

from notification.activity import ActivityLogger, ActivityType

__all__ = ['ActivityLogger', 'ActivityType']
