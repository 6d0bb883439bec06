"""
Notifications Package

Notification events produced by the quiz engine and the default sink that
stores them for the in-app notification bell.
"""
