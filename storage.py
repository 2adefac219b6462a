"""
JSON file store for SplitBill groups
"""
from __future__ import annotations
import json
import logging
import os
from typing import List, Optional

from config import dict_to_group, group_to_dict
from models import Group
from utils import app_dir

logger = logging.getLogger(__name__)


def groups_path() -> str:
    return os.path.join(app_dir(), "groups.json")


def load_groups(path: Optional[str] = None) -> List[Group]:
    """Load all groups; a missing file means no groups yet"""
    path = path or groups_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return []
    return [dict_to_group(d) for d in data]


def save_groups(groups: List[Group], path: Optional[str] = None) -> None:
    path = path or groups_path()
    with open(path, "w", encoding="utf-8") as f:
        json.dump([group_to_dict(g) for g in groups], f, ensure_ascii=False, indent=2)
    logger.info("saved %d groups to %s", len(groups), path)


def get_group(group_id: str, path: Optional[str] = None) -> Optional[Group]:
    for g in load_groups(path):
        if g.id == group_id:
            return g
    return None


def save_group(group: Group, path: Optional[str] = None) -> None:
    """Replace the stored group with the same id, or append it"""
    groups = load_groups(path)
    for i, g in enumerate(groups):
        if g.id == group.id:
            groups[i] = group
            break
    else:
        groups.append(group)
    save_groups(groups, path)


def delete_group(group_id: str, path: Optional[str] = None) -> None:
    groups = load_groups(path)
    save_groups([g for g in groups if g.id != group_id], path)
