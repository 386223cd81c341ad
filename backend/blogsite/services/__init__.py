# Services package init
"""
Blogsite Backend — Services Layer
==================================

What:  Business logic between routes (HTTP) and the database gateway.

Service Inventory:
    - BlogService: create/list/get/update/delete-all/search over `blogposts`

Services can be unit-tested with a mocked collection, without HTTP or MongoDB.
"""
