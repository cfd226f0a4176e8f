"""Product catalog service.

A CRUD resource over a single Product entity backed by a relational store
accessed through SQLModel, exposed over FastAPI.
"""

__version__ = "0.1.0"
