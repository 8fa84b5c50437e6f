"""
Acme Ice Cream API: Routes Package
===================================

Route Inventory:
    - landing.py:  GET    /                      (static landing page)
    - flavors.py:  GET    /api/flavors           (list)
                   POST   /api/flavors           (create)
                   PUT    /api/flavors/{id}      (rename)
                   DELETE /api/flavors/{id}      (delete)

Routes stay thin: read the request, call one FlavorService operation, pick
the status code.
"""
