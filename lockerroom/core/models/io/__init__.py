"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- users: Accounts, registration, login
- schools: Schools, students, payments, applications
- posts: Posts, feed pages, comments, announcements
- notifications: Notification inbox
- banners: Role-targeted banners
- xen_watch: Scout review submissions
- evaluation_forms: Form templates and evaluations
- system_settings: Runtime settings
- analytics: Platform reports
"""
