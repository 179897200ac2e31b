"""Live session engine (roster, pending joins, broadcast loop, directory).

Kept free of FastAPI concerns so it can be driven by the API routes and by tests.
"""
