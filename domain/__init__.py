"""
Domain layer - bookstore records passed between repositories, services and routes.

Nothing here imports SQLAlchemy or FastAPI.
"""
