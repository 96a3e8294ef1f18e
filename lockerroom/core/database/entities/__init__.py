"""
Database entity models.

This package contains all database entity models organized by business domain
and table relationships. Each module represents either:

1. A single database table and its related logic
2. A business domain that spans multiple related tables

Modules:
- users: Accounts and profiles
- schools: Schools, students, payment history and applications
- posts: Posts, announcements and engagement rows
- follows: Follow graph
- notifications: In-app notifications
- banners: Role-targeted banners
- xen_watch: Scout review submissions, reviews, feedback and payments
- evaluation_forms: Form templates, fields and scout submissions
- system_settings: Runtime key/value settings
"""

from . import (
    banners,
    evaluation_forms,
    follows,
    notifications,
    posts,
    schools,
    system_settings,
    users,
    xen_watch,
)

__all__ = [
    "banners",
    "evaluation_forms",
    "follows",
    "notifications",
    "posts",
    "schools",
    "system_settings",
    "users",
    "xen_watch",
]
