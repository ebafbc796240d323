"""
Extração da ação a partir do JSON enviado pelo Sentry.

A leitura é permissiva no topo (qualquer formato desconhecido vira
ActionKind.UNKNOWN) e estrita quando um formato reconhecido é detectado:
um "issue created" incompleto é erro, nunca uma notificação em branco.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .constants import ISSUE_CREATED_ACTION
from .errors import FieldType, MissingField, NotAction

logger = logging.getLogger(__name__)


class ActionKind(str, Enum):
    ISSUE_CREATED = "issue_created"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class IssueCreated:
    title: str
    project: str
    time: str
    level: str


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    issue: Optional[IssueCreated] = None

    def __post_init__(self):
        # ISSUE_CREATED sempre com payload; UNKNOWN nunca
        if (self.kind is ActionKind.ISSUE_CREATED) != (self.issue is not None):
            raise ValueError(f"Action {self.kind.value} com payload inconsistente: {self.issue!r}")

    @classmethod
    def issue_created(cls, title: str, project: str, time: str, level: str) -> "Action":
        return cls(ActionKind.ISSUE_CREATED, IssueCreated(title=title, project=project, time=time, level=level))

    @classmethod
    def unknown(cls) -> "Action":
        return cls(ActionKind.UNKNOWN)

    def __str__(self) -> str:
        if self.kind is ActionKind.ISSUE_CREATED:
            i = self.issue
            return f"{i.project}: issue `{i.title}` created at {i.time} ({i.level})"
        return "Unknown action!"


def _require_str(container: Dict[str, Any], key: str, path: str) -> str:
    if key not in container:
        raise MissingField(path)
    value = container[key]
    if not isinstance(value, str):
        raise FieldType(path)
    return value


class Body:
    def __init__(self, value: Any):
        self.value = value

    def action_str(self) -> Optional[str]:
        if not isinstance(self.value, dict):
            return None
        action = self.value.get("action")
        return action if isinstance(action, str) else None

    def data(self) -> Optional[Dict[str, Any]]:
        if not isinstance(self.value, dict):
            return None
        data = self.value.get("data")
        return data if isinstance(data, dict) else None

    def issue_map(self) -> Optional[Dict[str, Any]]:
        data = self.data()
        if data is None:
            return None
        issue = data.get("issue")
        return issue if isinstance(issue, dict) else None

    def is_issue(self) -> bool:
        data = self.data()
        return data is not None and "issue" in data

    def is_issue_created(self) -> bool:
        return self.is_issue() and self.action_str() == ISSUE_CREATED_ACTION

    def to_issue_created(self) -> Action:
        issue = self.issue_map()
        if issue is None:
            raise NotAction("issue_created")

        title = _require_str(issue, "title", "issue::title")

        if "project" not in issue:
            raise MissingField("issue::project")
        project_map = issue["project"]
        if not isinstance(project_map, dict):
            raise FieldType("issue::project")
        project = _require_str(project_map, "name", "issue::project::name")

        time = _require_str(issue, "lastSeen", "issue::lastSeen")
        level = _require_str(issue, "level", "issue::level")

        return Action.issue_created(title=title, project=project, time=time, level=level)

    def action(self) -> Action:
        logger.debug("Body.action(): data=%r", self.data())
        if self.is_issue_created():
            return self.to_issue_created()
        return Action.unknown()


def extract_action(document: Any) -> Action:
    return Body(document).action()
