# Routes package init
"""
TaskNest Backend — API Routes Package
=======================================

Route Inventory:
    - profiles.py:       /api/profiles (CRUD), /api/profiles/login
    - checklists.py:     /api/checklists (CRUD, password-confirmed delete)
    - tasks.py:          /api/tasks, /api/checklists/{id}/tasks
    - share_requests.py: /api/checklists/{id}/share, /api/profiles/{id}/share-requests,
                         /api/share-requests/{id}/respond
    - timer_logs.py:     /api/checklists/{id}/timer-logs
    - health.py:         /health

Routes are thin: extract the request data, call a service, pick the status
code. Errors are raised as application exceptions and rendered by the
global handlers in main.py.
"""
