#!/usr/bin/env python
# run:
# $ FLASK_APP=mini_app flask run
#
# GET /my_api/users/1 with an "Authorization: Bearer <jwt>" header containing {"id": "1"}
# returns the user and "isMe": true
from flask import Flask

from jaops import Application, OperationProcessor, Resource, ResourceSchema, jsonapi_attr
from jaops.errors import NotFoundError
from jaops.flask_api import JaopsFlaskAPI

USERS = {"1": {"id": "1", "name": "test", "email": "email@x.org"}}


class User(Resource):
    """
    description: My User description
    """

    schema = ResourceSchema(attributes={"name": str, "email": str})


class UserProcessor(OperationProcessor):
    @classmethod
    def should_handle(cls, resource_type):
        return resource_type == User.type

    async def get(self, op):
        if op.ref.id is None:
            return list(USERS.values())
        if op.ref.id not in USERS:
            raise NotFoundError(f"user {op.ref.id}")
        return USERS[op.ref.id]

    async def identify(self, op):
        return [USERS[op.ref.id]] if op.ref.id in USERS else []

    @jsonapi_attr(name="isMe")
    def is_me(self, record):
        return self.user is not None and self.user.id == record["id"]


def create_api(app, host="127.0.0.1", port=5000, prefix="my_api"):
    application = Application(namespace=prefix, resources=[User], processors=[UserProcessor])
    JaopsFlaskAPI(app, application)
    print(f"Starting API: http://{host}:{port}/{prefix}")


def create_app(host="127.0.0.1"):
    app = Flask("demo_app")
    create_api(app, host)
    return app


app = create_app()

if __name__ == "__main__":
    app.run()
