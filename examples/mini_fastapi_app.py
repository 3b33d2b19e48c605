#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Run:
  pip install -e . uvicorn
  python examples/mini_fastapi_app.py

Then open:
  http://127.0.0.1:8000/api/users?include=books
  http://127.0.0.1:8000/api/users/1/books?fields[book]=title
"""

from typing import List, Optional

from fastapi import FastAPI
from sqlalchemy import ForeignKey, String, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, scoped_session, sessionmaker

import uvicorn

from jaops import Application, Relationship, Resource, ResourceSchema, jsonapi_attr
from jaops.fastapi import JaopsFastAPI
from jaops.sqla import SqlAlchemyProcessor


class Base(DeclarativeBase):
    pass


class UserModel(Base):
    __tablename__ = "Users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String)
    email: Mapped[Optional[str]] = mapped_column(String)
    books: Mapped[List["BookModel"]] = relationship(back_populates="user")


class BookModel(Base):
    __tablename__ = "Books"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("Users.id"))
    user: Mapped[Optional[UserModel]] = relationship(back_populates="books")


class User(Resource):
    schema = ResourceSchema(
        attributes={"name": str, "email": str},
        relationships={"books": Relationship("book", key="books", inverse="user", has_many=True)},
    )


class Book(Resource):
    schema = ResourceSchema(
        attributes={"title": str},
        relationships={"user": Relationship("user", key="user", inverse="books")},
    )


class UserProcessor(SqlAlchemyProcessor):
    model = UserModel
    resource = User

    @jsonapi_attr(name="bookCount")
    def book_count(self, record):
        return len(record.books)


class BookProcessor(SqlAlchemyProcessor):
    model = BookModel
    resource = Book


def create_app() -> FastAPI:
    engine = create_engine("sqlite:///./mini_fastapi.db")
    Session = scoped_session(sessionmaker(bind=engine, autoflush=False))

    # Create tables + seed
    Base.metadata.create_all(engine)
    if Session.scalar(select(UserModel).limit(1)) is None:
        user = UserModel(name="test", email="email@x.org")
        Session.add_all([user, BookModel(title="test book", user=user)])
        Session.commit()

    app = FastAPI(title="jaops FastAPI mini app")

    # Make sure sessions are cleaned up
    @app.middleware("http")
    async def session_middleware(request, call_next):
        try:
            return await call_next(request)
        finally:
            Session.remove()

    application = Application(
        namespace="api", resources=[User, Book], processors=[UserProcessor, BookProcessor], db_session=Session
    )
    JaopsFastAPI(app, application)

    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok", "api": "/api/users"}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8000)
