from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Declarative base shared by the account, room and booking tables.

    Alembic's env.py and the test fixtures both build the schema from
    ``Base.metadata``.
    """

    pass
