# Routes package init
"""
AI Productivity Hub Backend — API Routes Package
=================================================

Route Inventory:
    - cron.py:    GET /api/cron/notifications, /api/cron-weekly, /api/cron-daily
                  (Authorization: Bearer <CRON_SECRET>)
    - admin.py:   GET /api/admin/feedback, /api/admin/users/{id}/ai-usage
                  (x-admin-key: <ADMIN_KEY>)
    - health.py:  GET /health (open)

Routes stay thin: authenticate through a router dependency, call one
service, render the envelope.
"""
