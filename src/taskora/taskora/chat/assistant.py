from __future__ import annotations

import re
from typing import Iterator, List

TOPICS = {
    "how do i use taskora": (
        "Taskora is a company management workspace. Here's how to get started:\n\n"
        "1. **Dashboard** - your overview, tasks and team updates\n"
        "2. **Tasks** - create and track tasks on the board\n"
        "3. **Staff** - manage team members (Admin/Manager only)\n"
        "4. **Attendance** - check in and out every day\n"
        "5. **Files** - upload and share documents\n"
        "6. **Whiteboard** - sketch ideas with your team\n\n"
        "Need help with something specific?"
    ),
    "how do i create a new task": (
        "To create a new task:\n\n"
        "1. Open **Tasks** from the sidebar\n"
        "2. Fill in the title, an optional description, the priority and a due date\n"
        "3. Click **Create Task**\n\n"
        "Drag a card between columns to change its status."
    ),
    "how do i manage my team members": (
        "Team management is available for Super Admins and Managers:\n\n"
        "1. Open the **Staff** page\n"
        "2. Search the directory by name or e-mail\n"
        "3. Super Admins can add staff, deactivate accounts and remove members"
    ),
    "how does attendance tracking work": (
        "Attendance in Taskora:\n\n"
        "1. Open **Attendance** and press **Check In** when you start\n"
        "2. Check-ins from 10:00 on are marked late\n"
        "3. Press **Check Out** when you leave; your worked time is shown in the history\n"
        "4. Managers see the daily sheet, the weekly overview and can export CSV reports"
    ),
}

GREETING = (
    "I'm your Taskora AI Assistant! I can help you navigate the system, explain features "
    "and answer questions about task management. What would you like to know?"
)


def _answer(query: str) -> str:
    q = query.lower().strip()
    if not q:
        return GREETING
    for key, response in TOPICS.items():
        if q in key or key in q:
            return response
    if "task" in q:
        return TOPICS["how do i create a new task"]
    if "team" in q or "staff" in q or "member" in q:
        return TOPICS["how do i manage my team members"]
    if "attendance" in q or "check in" in q:
        return TOPICS["how does attendance tracking work"]
    if "help" in q or "how" in q or "what" in q:
        return TOPICS["how do i use taskora"]
    return (
        f'I understand you\'re asking about: "{query.strip()}". I can help with Taskora questions like:\n\n'
        "• How to use the different features\n"
        "• Managing tasks and teams\n"
        "• Attendance tracking\n"
        "• File management\n\n"
        "Could you rephrase your question?"
    )


class FallbackAssistant:
    """Keyword answers used when no language model endpoint is configured.

    Same ``stream(messages)`` interface as ``ChatCompletionClient``.
    """

    def stream(self, messages: List[dict]) -> Iterator[str]:
        query = next((m.get("content", "") for m in reversed(messages) if m.get("role") == "user"), "")
        # word-sized pieces so the page renders it like a real stream
        for piece in re.findall(r"\S+\s*|\s+", _answer(query)):
            yield piece
