"""
API route modules.

This package contains subrouters for:
- Auth: signup, register, login, refresh, logout and current user
- Business: business CRUD plus the exams and users of a business
- Users: single-user read, update and soft delete
- Courses: courses of an exam and subjects of a course
- Batches: batches and batch memberships
- Content: uploads per batch and file download
- Permission: per-user permission grants
- Teachers: teacher profiles
- Announcements: business-wide announcements

Routers are included from contentkosh_api.api.main (under the /api prefix).
"""
