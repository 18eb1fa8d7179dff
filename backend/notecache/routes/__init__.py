# Routes package init
"""
NoteCache — API Routes Package
===============================

Route Inventory:
    - notes.py:   GET    /notes             (list every note with its text)
                  GET    /notes/{name}      (read one note as plain text)
                  PUT    /notes/{name}      (replace one note's text)
                  DELETE /notes/{name}      (remove one note)
    - write.py:   POST   /write             (create a note from form fields)
    - health.py:  GET    /health            (storage health check)

Routes are THIN: they pull data out of the request, call one NoteStore
operation, and pick the status code. Errors are formatted by the global
handlers in main.py.
"""
