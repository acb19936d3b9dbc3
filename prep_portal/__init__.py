"""
Placement Prep Portal
Company hiring records with moderated, student-contributed interview content.

Architecture:
- MongoDB: companies, submissions, notifications, users
- Moderation: approved submissions are merged into the company document
- Notifications: one per user when a company is first approved
"""

__version__ = "1.0.0"
