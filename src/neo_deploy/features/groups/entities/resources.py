"""Leaf resources attached under groups.

Leaves never appear in ``traversal_ids``; they point at their owner and
inherit the owner's role bindings.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ....config.constants import ROOT_GROUP_ID


@dataclass
class Application:
    """A deployable application owned by a group."""

    id: int
    name: str
    group_id: int
    description: str = ""
    created_by: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Cluster:
    """A running instance of an application in one environment."""

    id: int
    name: str
    application_id: int
    environment: str = ""
    created_by: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Template:
    """A deployment template; ``group_id`` 0 means a root-level template."""

    id: int
    name: str
    group_id: int = ROOT_GROUP_ID
    description: str = ""
    created_by: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class PipelineRun:
    """A build or deploy run executed against a cluster."""

    id: int
    cluster_id: int
    title: str = ""
    action: str = ""
    created_by: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
