"""
In-memory stand-in for supabase.Client used by the tests.

Implements the subset of the PostgREST query builder the services call
(select/insert/update/delete, eq/neq/in_/is_, order, limit, range,
count="exact"), the unique/foreign-key/check/cascade rules of
001_initial_schema.sql, the two RPC functions, and the GoTrue calls used by
AuthService. Store errors are raised as postgrest APIError with the
Postgres SQLSTATE, like the real client does.
"""

import copy
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError

FIELD_TYPES = ("text", "number", "select", "date", "boolean", "email", "url", "richtext", "json", "relation")
MEMBER_ROLES = ("owner", "admin", "member")

TABLES = (
    "profiles",
    "organizations",
    "organization_members",
    "projects",
    "entity_tables",
    "entity_fields",
    "entity_records",
    "workspace_invitations",
)

DEFAULTS = {
    "profiles": {"email": None, "full_name": None, "avatar_url": None},
    "organizations": {"description": None},
    "organization_members": {"role": "member"},
    "projects": {"description": None, "color": "blue"},
    "entity_tables": {"project_id": None, "description": None},
    "entity_fields": {"order_index": 0, "options": {}},
    "entity_records": {"data": {}},
    "workspace_invitations": {
        "role": "member",
        "expires_at": None,
        "accepted_at": None,
        "accepted_by_user_id": None,
    },
}

UNIQUE = {
    "profiles": [("id",)],
    "organizations": [("created_by", "slug")],
    "organization_members": [("organization_id", "user_id")],
    "workspace_invitations": [("token",)],
}

# (column, parent table); parent rows deleted -> children deleted
FOREIGN_KEYS = {
    "organization_members": [("organization_id", "organizations")],
    "projects": [("workspace_id", "organizations")],
    "entity_tables": [("workspace_id", "organizations"), ("project_id", "projects")],
    "entity_fields": [("table_id", "entity_tables")],
    "entity_records": [("table_id", "entity_tables")],
    "workspace_invitations": [("organization_id", "organizations")],
}

CHECKS = {
    "organization_members": [("role", lambda v: v in MEMBER_ROLES)],
    "entity_fields": [("type", lambda v: v in FIELD_TYPES), ("order_index", lambda v: v >= 0)],
    "workspace_invitations": [("role", lambda v: v in MEMBER_ROLES)],
}

NOT_NULL = {
    "organizations": ("name", "slug", "created_by"),
    "organization_members": ("organization_id", "user_id"),
    "projects": ("workspace_id", "name"),
    "entity_tables": ("workspace_id", "name"),
    "entity_fields": ("table_id", "name", "type"),
    "entity_records": ("table_id",),
    "workspace_invitations": ("organization_id", "email", "token", "created_by_user_id"),
}


def store_error(code: str, message: str) -> APIError:
    return APIError({"code": code, "message": message, "details": None, "hint": None})


class FakeDatabase:
    def __init__(self):
        self.rows: Dict[str, List[Dict[str, Any]]] = {name: [] for name in TABLES}
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)
        # set to make every following request fail, e.g. to simulate an outage
        self.fail_with: Optional[APIError] = None

    def now(self) -> str:
        """Strictly increasing timestamps, so created_at ordering is deterministic"""
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def _check_row(self, table: str, row: Dict[str, Any], ignore: Optional[Dict[str, Any]] = None) -> None:
        for column in NOT_NULL.get(table, ()):
            if row.get(column) is None:
                raise store_error("23502", f'null value in column "{column}" of relation "{table}"')
        for column, check in CHECKS.get(table, ()):
            if column in row and row[column] is not None and not check(row[column]):
                raise store_error("23514", f'new row for relation "{table}" violates check constraint on "{column}"')
        for column, parent in FOREIGN_KEYS.get(table, ()):
            value = row.get(column)
            if value is not None and not any(r["id"] == value for r in self.rows[parent]):
                raise store_error("23503", f'insert or update on table "{table}" violates foreign key "{column}"')
        for columns in UNIQUE.get(table, ()):
            key = tuple(row.get(c) for c in columns)
            for existing in self.rows[table]:
                if existing is ignore:
                    continue
                if tuple(existing.get(c) for c in columns) == key:
                    raise store_error("23505", f'duplicate key value violates unique constraint on {table}{columns}')

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        row = copy.deepcopy(DEFAULTS.get(table, {}))
        row.update(copy.deepcopy(values))
        row.setdefault("id", str(uuid.uuid4()))
        timestamp = self.now()
        row.setdefault("created_at", timestamp)
        if table not in ("organization_members", "workspace_invitations"):
            row.setdefault("updated_at", timestamp)
        self._check_row(table, row)
        self.rows[table].append(row)
        return row

    def update(self, table: str, row: Dict[str, Any], values: Dict[str, Any]) -> Dict[str, Any]:
        candidate = {**row, **copy.deepcopy(values)}
        self._check_row(table, candidate, ignore=row)
        row.update(copy.deepcopy(values))
        return row

    def delete(self, table: str, row: Dict[str, Any]) -> None:
        self.rows[table] = [r for r in self.rows[table] if r is not row]
        for child, keys in FOREIGN_KEYS.items():
            for column, parent in keys:
                if parent != table:
                    continue
                for child_row in [r for r in self.rows[child] if r.get(column) == row["id"]]:
                    if child_row in self.rows[child]:
                        self.delete(child, child_row)


class FakeQuery:
    def __init__(self, db: FakeDatabase, table: str):
        self.db = db
        self.table = table
        self.operation = "select"
        self.columns = "*"
        self.count = None
        self.head = False
        self.payload = None
        self.filters = []
        self.orders = []
        self._limit = None
        self._offset = 0

    # operations

    def select(self, *columns, count=None, head=None):
        self.operation = "select"
        self.columns = ",".join(columns) if columns else "*"
        self.count = count
        self.head = bool(head)
        return self

    def insert(self, values, **kwargs):
        self.operation = "insert"
        self.payload = values
        return self

    def update(self, values, **kwargs):
        self.operation = "update"
        self.payload = values
        return self

    def delete(self, **kwargs):
        self.operation = "delete"
        return self

    # filters and modifiers

    def eq(self, column, value):
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda r: r.get(column) != value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda r: r.get(column) in values)
        return self

    def is_(self, column, value):
        if value not in ("null", None):
            raise NotImplementedError("only is_(column, 'null') is supported")
        self.filters.append(lambda r: r.get(column) is None)
        return self

    def order(self, column, desc=False, **kwargs):
        self.orders.append((column, desc))
        return self

    def limit(self, size, **kwargs):
        self._limit = size
        return self

    def offset(self, size):
        self._offset = size
        return self

    def range(self, start, end, **kwargs):
        self._offset = start
        self._limit = end - start + 1
        return self

    def _matching(self) -> List[Dict[str, Any]]:
        return [r for r in self.db.rows[self.table] if all(f(r) for f in self.filters)]

    def _project(self, row: Dict[str, Any]) -> Dict[str, Any]:
        row = copy.deepcopy(row)
        if self.columns.strip() == "*":
            return row
        wanted = [c.strip() for c in self.columns.split(",") if c.strip()]
        return {c: row.get(c) for c in wanted}

    def execute(self):
        if self.db.fail_with is not None:
            raise self.db.fail_with

        if self.operation == "insert":
            values = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self.db.insert(self.table, v) for v in values]
            return SimpleNamespace(data=[copy.deepcopy(r) for r in inserted], count=None)

        rows = self._matching()

        if self.operation == "update":
            updated = [self.db.update(self.table, r, self.payload) for r in rows]
            return SimpleNamespace(data=[copy.deepcopy(r) for r in updated], count=None)

        if self.operation == "delete":
            deleted = [copy.deepcopy(r) for r in rows]
            for row in rows:
                self.db.delete(self.table, row)
            return SimpleNamespace(data=deleted, count=None)

        total = len(rows) if self.count == "exact" else None
        for column, desc in reversed(self.orders):
            rows = sorted(rows, key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        rows = rows[self._offset:]
        if self._limit is not None:
            rows = rows[:self._limit]
        data = [] if self.head else [self._project(r) for r in rows]
        return SimpleNamespace(data=data, count=total)


class FakeRpc:
    def __init__(self, client: "FakeSupabase", name: str, params: Dict[str, Any]):
        self.client = client
        self.name = name
        self.params = params

    def execute(self):
        db = self.client.db
        if db.fail_with is not None:
            raise db.fail_with
        handler = getattr(self, f"_{self.name}", None)
        if handler is None:
            raise store_error("PGRST202", f"Could not find the function public.{self.name}")
        return SimpleNamespace(data=handler(**self.params), count=None)

    def _create_organization_with_owner(self, p_name, p_slug, p_description, p_user_id):
        db = self.client.db
        organization = db.insert("organizations", {
            "name": p_name,
            "slug": p_slug,
            "description": p_description or None,
            "created_by": p_user_id,
        })
        try:
            db.insert("organization_members", {
                "organization_id": organization["id"],
                "user_id": p_user_id,
                "role": "owner",
            })
        except APIError:
            db.delete("organizations", organization)
            raise
        return copy.deepcopy(organization)

    def _accept_workspace_invitation(self, p_token, p_user_id):
        db = self.client.db
        now = datetime.now(timezone.utc)
        pending = [
            r for r in db.rows["workspace_invitations"]
            if r["token"] == p_token
            and r["accepted_at"] is None
            and (r["expires_at"] is None or datetime.fromisoformat(r["expires_at"].replace("Z", "+00:00")) > now)
        ]
        if not pending:
            raise store_error("P0002", "invitation not found, expired or already accepted")
        invitation = pending[0]
        user = self.client.identity.user_by_id(p_user_id)
        if user is None or user["email"].lower() != invitation["email"].lower():
            raise store_error("28000", "invitation was sent to a different email")
        # the membership insert runs first so a failure leaves the invitation untouched
        member = db.insert("organization_members", {
            "organization_id": invitation["organization_id"],
            "user_id": p_user_id,
            "role": invitation["role"],
        })
        db.update("workspace_invitations", invitation, {
            "accepted_at": db.now(),
            "accepted_by_user_id": p_user_id,
        })
        return copy.deepcopy(member)


class FakeIdentity:
    """GoTrue server state shared by every client of one project"""

    def __init__(self, db: FakeDatabase):
        self.db = db
        self.users: Dict[str, Dict[str, Any]] = {}
        self.tokens: Dict[str, str] = {}
        self.revoked: List[str] = []
        # profiles are created by a trigger in the real database
        self.create_profiles = True

    def user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        return next((r for r in self.users.values() if r["id"] == user_id), None)

    def issue_token(self, user_id: str) -> str:
        token = f"token-{uuid.uuid4()}"
        self.tokens[token] = user_id
        return token


def _user(record: Dict[str, Any]) -> SimpleNamespace:
    return SimpleNamespace(
        id=record["id"],
        email=record["email"],
        user_metadata={"full_name": record["full_name"]},
    )


class FakeAdminAuth:
    def __init__(self, identity: FakeIdentity):
        self.identity = identity

    def sign_out(self, jwt: str, scope: str = "global"):
        if jwt not in self.identity.tokens:
            raise Exception("invalid JWT: unable to parse or verify signature")
        self.identity.revoked.append(jwt)
        del self.identity.tokens[jwt]


class FakeAuth:
    """Client-side auth: sign-in stores a session on this client only"""

    def __init__(self, identity: FakeIdentity):
        self.identity = identity
        self.admin = FakeAdminAuth(identity)
        self.session: Optional[SimpleNamespace] = None

    def sign_up(self, credentials: Dict[str, Any]):
        identity = self.identity
        email = credentials["email"].lower()
        if email in identity.users:
            raise Exception("User already registered")
        metadata = credentials.get("options", {}).get("data", {})
        record = {
            "id": str(uuid.uuid4()),
            "email": email,
            "password": credentials["password"],
            "full_name": metadata.get("full_name"),
        }
        identity.users[email] = record
        if identity.create_profiles:
            identity.db.insert("profiles", {
                "id": record["id"],
                "email": email,
                "full_name": record["full_name"],
            })
        return SimpleNamespace(user=_user(record), session=None)

    def sign_in_with_password(self, credentials: Dict[str, Any]):
        record = self.identity.users.get(credentials["email"].lower())
        if record is None or record["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        self.session = SimpleNamespace(access_token=self.identity.issue_token(record["id"]))
        return SimpleNamespace(user=_user(record), session=self.session)

    def get_user(self, jwt: Optional[str] = None):
        user_id = self.identity.tokens.get(jwt)
        if user_id is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=_user(self.identity.user_by_id(user_id)))

    def sign_out(self):
        self.session = None


class FakeSupabase:
    def __init__(self, db: Optional[FakeDatabase] = None, identity: Optional[FakeIdentity] = None):
        self.db = db or FakeDatabase()
        self.identity = identity or FakeIdentity(self.db)
        self.auth = FakeAuth(self.identity)

    def session_client(self) -> "FakeSupabase":
        """A new client of the same project, like create_client() per request"""
        return FakeSupabase(self.db, self.identity)

    def table(self, name: str) -> FakeQuery:
        if name not in self.db.rows:
            raise store_error("42P01", f'relation "public.{name}" does not exist')
        return FakeQuery(self.db, name)

    def from_(self, name: str) -> FakeQuery:
        return self.table(name)

    def rpc(self, name: str, params: Optional[Dict[str, Any]] = None) -> FakeRpc:
        return FakeRpc(self, name, params or {})
