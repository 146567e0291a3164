"""Application state: the model, its messages and the reducer."""

from histree.state.messages import Command, LoadSession, ReloadIndex, RunExport
from histree.state.model import ExportState, ExportStatus, Model, ViewMode
from histree.state.tree import ProjectGroup, TreeItem, TreeNodeKind, build_project_groups
from histree.state.update import update

__all__ = [
    "Command",
    "ExportState",
    "ExportStatus",
    "LoadSession",
    "Model",
    "ProjectGroup",
    "ReloadIndex",
    "RunExport",
    "TreeItem",
    "TreeNodeKind",
    "ViewMode",
    "build_project_groups",
    "update",
]
