# Services package init
"""
AI Productivity Hub Backend — Services Layer
=============================================

What:  Business logic sitting between routes (HTTP) and the hosted database.
Why:   Routes handle HTTP and authentication; services can be unit-tested
       with a mocked session and no HTTP at all.

Service Inventory:
    - jobs.py:     run_job() shell + NotificationsJob, WeeklyReportJob, DailyDigestJob
    - usage.py:    UsageMeter (bump / get_today / check_quota) over a UsageStore
    - feedback.py: FeedbackService (admin feedback listing)
    - profiles.py: ProfileService (single profile lookup for admin reads)
"""
