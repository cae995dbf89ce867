"""Persona construction: renders a character and the player's known facts into a system prompt."""

from __future__ import annotations

from typing import List, Sequence

from .models import Character, Evidence, TimeClue
from .systems.directives import format_directive


def build_persona(
    character: Character,
    evidence: Sequence[Evidence],
    clues: Sequence[TimeClue],
) -> str:
    """Build the system prompt for one character.

    Pure function of its arguments: the same character and the same unlocked
    evidence and clues always give the same text. Sections without content are
    left out.
    """
    sections: List[str] = []

    if character.system_prompt:
        sections.append(character.system_prompt.strip())

    profile = f"You are {character.name}"
    if character.role:
        profile += f", {character.role}"
    sections.append(
        f"{profile}. You are being questioned by a detective about a case. "
        "Stay in character at all times and answer as this person would."
    )

    if character.world_view:
        sections.append(_section("World view", [character.world_view.strip()]))
    if character.personality:
        sections.append(_section("Personality", _bullets(character.personality)))
    if character.background:
        sections.append(_section("Background", [character.background.strip()]))
    if character.secrets:
        sections.append(_section("Secrets (never reveal them directly)", _bullets(character.secrets)))

    lying = character.lying_rules
    if lying.allowed or lying.forbidden:
        lines = []
        if lying.allowed:
            lines.append("You may lie about:")
            lines.extend(_bullets(lying.allowed))
        if lying.forbidden:
            lines.append("You must never lie about:")
            lines.extend(_bullets(lying.forbidden))
        sections.append(_section("Lying rules", lines))

    if character.language_style:
        sections.append(_section("Speech style", _bullets(character.language_style)))

    if character.timeline:
        sections.append(_section(
            "What you did (your true timeline)",
            [f"- {entry.time}: {entry.action}" for entry in character.timeline],
        ))

    if character.unlock_rules:
        lines = [
            f"- When {rule.when}, append {format_directive(rule.flag)} to the end of your reply."
            for rule in character.unlock_rules
        ]
        lines.append("Never explain or mention these tags.")
        sections.append(_section("Revelations", lines))

    known = [f"- {e.name}: {e.description.strip()}" for e in evidence]
    known.extend(f"- {c.title}: {c.content.strip()}" for c in clues)
    sections.append(_section(
        "What the detective already knows",
        known or ["- Nothing yet."],
    ))

    sections.append(
        "Reply with your spoken words only, in a natural conversational length."
    )
    return "\n\n".join(sections)


def _section(title: str, lines: Sequence[str]) -> str:
    return f"[{title}]\n" + "\n".join(lines)


def _bullets(items: Sequence[str]) -> List[str]:
    return [f"- {item}" for item in items]
