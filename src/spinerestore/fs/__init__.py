"""Filesystem naming and move operations for spinerestore."""

from spinerestore.fs.naming import (
    NameReservations,
    candidate_names,
    plan_extension,
    plan_move,
    plan_rename,
    unique_path,
)
from spinerestore.fs.operations import commit_plan, move_exclusive

__all__ = [
    "NameReservations",
    "candidate_names",
    "commit_plan",
    "move_exclusive",
    "plan_extension",
    "plan_move",
    "plan_rename",
    "unique_path",
]
