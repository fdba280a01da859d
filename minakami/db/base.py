from fastapi import Request
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def get_database(request: Request):
    """FastAPI dependency: the DatabaseService created in the app lifespan."""
    return request.app.state.database
