# Services package init
"""
TaskNest Backend — Services Layer
===================================

What:  Business logic between routes (HTTP) and the database session.
How:   Each service method receives the request's AsyncSession explicitly,
       applies the resource's rules and returns response schemas.

Service Inventory:
    - ProfileService:   profile CRUD, login, password re-verification
    - ChecklistService: checklist CRUD, password-confirmed delete
    - TaskService:      task CRUD with parent/checklist consistency
    - ShareService:     share-request workflow (send, inbox, respond)
    - ChecklistCloner:  deep copy of a checklist and its task tree
    - TimerLogService:  append-only timer logs
"""
