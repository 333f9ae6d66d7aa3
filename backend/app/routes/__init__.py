# Routes package init
"""
Portfolio API — API Routes Package
===================================

Route Inventory:
    - pieces.py:  /api/piece*, /api/pieces*, /api/piece-keys, /api/featured-pieces
    - info.py:    /api/info*
    - images.py:  /api/upload, /api/photos, /api/images/{image}/delete-image,
                  /images/{filename}
    - health.py:  /health

Routes stay thin: extract path/body data, call one service, return the
result. Business rules and store access live in app/services.
"""
