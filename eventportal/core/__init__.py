"""
Environment-free rules shared by the dashboard and the notification
dispatcher: audience resolution, event status and clock sync.
"""
from .audience import is_visible, filter_visible, select_recipients
from .event_status import EventState, EventStatus, compute_status, split_tabs
from .roles import derive_role
from .time_sync import TimeSync
