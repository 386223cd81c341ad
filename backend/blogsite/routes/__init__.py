# Routes package init
"""
Blogsite Backend — Routes Package
==================================

Route Inventory:
    - blog.py:    /api/blogposts, /api/blogposts/{post,edit,get,search}, /api/deleteall
    - health.py:  GET /health
    - pages.py:   /, /projects, /pieces, /blog and other frontend files (fallback)

Routes stay thin: read the request, call the service, shape the response.
"""
