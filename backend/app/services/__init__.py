# Services package init
"""
Portfolio API — Services Layer
===============================

Service Inventory:
    - PieceService: piece lookups, listings, featured flag, updates, deletes
    - InfoService:  site info listing, creation and single-field updates
    - PhotoService: upload → validate → store → record metadata; list; delete
    - FileService:  file validation, unique naming, disk reads/writes
    - store:        id parsing, field allow-lists, driver error translation
"""
