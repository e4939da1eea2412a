"""Prompt builders for the AI assistant."""

from dataclasses import dataclass

LANGUAGE_NAMES = {"en": "English", "ru": "Russian"}

PRIORITY_MARKERS = {
    "URGENT": "🔴",
    "HIGH": "🟠",
    "MEDIUM": "🟡",
    "LOW": "🟢",
}


@dataclass
class DigestInput:
    total: int
    todo: int
    in_progress: int
    review: int
    done: int
    overdue: int
    tasks_list: str


@dataclass
class AssistantContext:
    user_name: str | None
    projects_count: int
    tasks_context: str | None


def _language(locale: str) -> str:
    return LANGUAGE_NAMES.get(locale, "English")


def build_task_generation_prompt(title: str, locale: str = "en") -> str:
    return f"""You help a team plan work on a kanban board.
Given the task title below, write a short actionable description, pick a
priority and estimate how many days the task needs.

Task title: "{title}"

Reply with JSON only, no commentary:
{{
  "description": "2-4 sentences, at most 2000 characters",
  "priority": "LOW" | "MEDIUM" | "HIGH" | "URGENT",
  "deadlineDays": integer from 1 to 90
}}

Write the description in {_language(locale)}."""


def build_digest_prompt(data: DigestInput, locale: str = "en") -> str:
    tasks_list = data.tasks_list or "(no active tasks)"
    return f"""Write a short daily digest for a project member.

Their tasks in this project:
- total: {data.total}
- to do: {data.todo}
- in progress: {data.in_progress}
- in review: {data.review}
- done: {data.done}
- overdue: {data.overdue}

Active tasks by priority:
{tasks_list}

Summarise the state in 3-5 sentences, point out what needs attention first
and mention overdue work if there is any. Use plain text with at most a few
bullet points. Answer in {_language(locale)}."""


def build_assistant_system_prompt(context: AssistantContext, locale: str = "en") -> str:
    lines = [
        "You are the assistant of a kanban task manager.",
        "You help users plan projects, break work into tasks and prioritise.",
    ]
    if context.user_name:
        lines.append(f"The user's name is {context.user_name}.")
    lines.append(f"The user is a member of {context.projects_count} project(s).")
    if context.tasks_context:
        lines.append("Their open tasks:")
        lines.append(context.tasks_context)
    lines.append(
        "When the user asks you to create a project, reply with a JSON block of the form "
        '{"action": "create_project", "project": {"name": "...", "description": "..."}, '
        '"tasks": [{"title": "...", "description": "...", "priority": "MEDIUM", "deadlineDays": 7}]} '
        "with at most 10 tasks."
    )
    lines.append(f"Answer in {_language(locale)}.")
    return "\n".join(lines)
