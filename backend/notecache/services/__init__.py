# Services package init
"""
NoteCache — Services Layer
===========================

What:  Storage logic sitting between routes (HTTP) and the filesystem.

Service Inventory:
    - NoteStore: name → <name>.txt mapping and the create/get/update/delete/list
      rules, with NotFound / AlreadyExists / InvalidInput / StorageFailure
      raised as exceptions from notecache.exceptions
"""
