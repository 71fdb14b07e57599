"""Mutation commands accepted by the asset store.

The dashboard never touches the store directly: each user intent becomes one
of the command objects below and goes through :func:`apply`, which returns
whether anything changed together with the collection as it now stands.
"""

from dataclasses import dataclass, field
from functools import singledispatch
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Create:
    draft: Dict[str, Any]


@dataclass(frozen=True)
class Assign:
    asset_id: int
    employee_name: str
    employee_id: Optional[str] = None


@dataclass(frozen=True)
class Unassign:
    asset_id: int


@dataclass(frozen=True)
class UpdateStatus:
    asset_id: int
    status: str


@dataclass(frozen=True)
class UpdateLocation:
    asset_id: int
    location: str


@dataclass(frozen=True)
class UpdateFields:
    asset_id: int
    changes: Dict[str, Any]


@dataclass(frozen=True)
class Delete:
    asset_id: int


@dataclass
class CommandResult:
    applied: bool
    asset_id: Optional[int]
    assets: List[dict] = field(default_factory=list)


@singledispatch
def _execute(command, db):
    raise TypeError(f"Unsupported command: {type(command).__name__}")


@_execute.register
def _(command: Create, db):
    asset_id = db.add_asset(command.draft)
    return asset_id is not None, asset_id


@_execute.register
def _(command: Assign, db):
    return db.assign(command.asset_id, command.employee_name, command.employee_id), command.asset_id


@_execute.register
def _(command: Unassign, db):
    return db.unassign(command.asset_id), command.asset_id


@_execute.register
def _(command: UpdateStatus, db):
    return db.update_status(command.asset_id, command.status), command.asset_id


@_execute.register
def _(command: UpdateLocation, db):
    return db.update_location(command.asset_id, command.location), command.asset_id


@_execute.register
def _(command: UpdateFields, db):
    return db.update_fields(command.asset_id, command.changes), command.asset_id


@_execute.register
def _(command: Delete, db):
    return db.delete_asset(command.asset_id), command.asset_id


def apply(db, command):
    applied, asset_id = _execute(command, db)
    return CommandResult(applied=applied, asset_id=asset_id, assets=db.list_assets())
