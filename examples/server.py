# /// script
# requires-python = ">=3.12"
# dependencies = [
#     "restmux[otel] @ file:///${PROJECT_ROOT}/..",
#     "granian[uvloop]>=2.6.0,<3.0.0",
# ]
# ///
"""RSGI server demo.

Fully functional JSON API using Granian + restmux.

    curl localhost:8000/users
    curl -X POST localhost:8000/users -d '{"name": "ada"}'
    curl localhost:8000/users/1
    curl -X DELETE localhost:8000/users/1
"""

import asyncio
import logging
import sqlite3
from http import HTTPStatus

from granian.server.embed import Server

from restmux import App, RequestContext, Router
from restmux.middleware.otel import otel

ADDRESS = "127.0.0.1"
PORT = 8000

_db = sqlite3.connect(":memory:")
_db.cursor().executescript("""
CREATE TABLE IF NOT EXISTS user (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL
);
""")


def controller(router: Router) -> None:
    users = UserController(_db)
    router.get("/", lambda req: req.send_response("Welcome home"))
    router.get("/users", users.index)
    router.post("/users", users.create)
    router.get("/users/{id}", users.show)
    router.put("/users/{id}", users.update)
    router.delete("/users/{id}", users.destroy)
    router.no_mapping(
        lambda req: req.send_response({"error": "not found"}, HTTPStatus.NOT_FOUND)
    )


class UserController:
    def __init__(self, db: sqlite3.Connection) -> None:
        self.db = db

    def index(self, req: RequestContext) -> None:
        rows = self.db.execute("SELECT id, name FROM user").fetchall()
        req.send_response([{"id": row[0], "name": row[1]} for row in rows])

    def show(self, req: RequestContext) -> None:
        row = self.db.execute(
            "SELECT id, name FROM user WHERE id = ?", (req.path_variables["id"],)
        ).fetchone()
        if row is None:
            req.send_response({"error": "not found"}, HTTPStatus.NOT_FOUND)
        req.send_response({"id": row[0], "name": row[1]})

    def create(self, req: RequestContext) -> None:
        name = _name(req)
        row = self.db.execute(
            "INSERT INTO user (name) VALUES (?) RETURNING id, name", (name,)
        ).fetchone()
        req.send_response({"id": row[0], "name": row[1]}, HTTPStatus.CREATED)

    def update(self, req: RequestContext) -> None:
        name = _name(req)
        row = self.db.execute(
            "UPDATE user SET name = ? WHERE id = ? RETURNING id, name",
            (name, req.path_variables["id"]),
        ).fetchone()
        if row is None:
            req.send_response({"error": "not found"}, HTTPStatus.NOT_FOUND)
        req.send_response({"id": row[0], "name": row[1]})

    def destroy(self, req: RequestContext) -> None:
        self.db.execute("DELETE FROM user WHERE id = ?", (req.path_variables["id"],))
        req.send_response({"deleted": req.path_variables["id"]})


def _name(req: RequestContext) -> str:
    if not isinstance(req.body, dict) or not isinstance(req.body.get("name"), str):
        req.send_response({"error": "missing name"}, HTTPStatus.UNPROCESSABLE_ENTITY)
    return req.body["name"]


async def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    app = App(controller)
    app.use(otel())

    server = Server(app, address=ADDRESS, port=PORT, log_access=True)
    try:
        await server.serve()
    except asyncio.CancelledError:
        pass


if __name__ == "__main__":
    asyncio.run(main())
