"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, FilterOptions, ...)
- task_store.py: persisted, copy-on-write task collection (CRUD)
- task_query.py: pure filter/search/sort pipeline for the list view
- task_forms.py: input validation for the add/edit form
"""
