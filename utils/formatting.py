"""
Shared formatting helpers for group replies.
"""

from collections.abc import Iterable, Sequence

from config import MEMBERS_VERTICAL_LIST_MAX

# Discord's hard limit for message content
MESSAGE_CHAR_LIMIT = 2000


def pluralize(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def format_group_list(summaries: Iterable) -> str:
    """Render the /list reply from GroupSummary items."""
    lines = [
        f"• **{s.group.name}** ({pluralize(s.member_count, 'member')})" for s in summaries
    ]
    return "**Available Groups**:\n" + "\n".join(lines)


def format_member_list(group_name: str, usernames: Sequence[str]) -> str:
    """
    Render the /members reply.

    Small groups get one bullet per member; large groups get a single
    comma-separated line so the reply stays readable.
    """
    header = f"**Members in {group_name}**:\n"
    ordered = sorted(usernames, key=str.lower)
    if len(ordered) <= MEMBERS_VERTICAL_LIST_MAX:
        return header + "\n".join(f"• {name}" for name in ordered)
    return header + ", ".join(ordered)


def format_ping_message(group_name: str, member_ids: Iterable[int], message: str | None) -> str:
    mentions = " ".join(f"<@{uid}>" for uid in member_ids)
    content = f"🔔 **Group {group_name} Alert!** 🔔\n{mentions}\n"
    if message:
        content += f"\n{message}"
    return content


def chunk_message(content: str, limit: int = MESSAGE_CHAR_LIMIT) -> list[str]:
    """
    Split content into pieces that each fit in one Discord message.

    Breaks on newlines and spaces so a mention is never cut in half; only a
    single word longer than the limit is hard-split.
    """
    if len(content) <= limit:
        return [content]

    chunks: list[str] = []
    current = ""
    for line in content.split("\n"):
        for i, word in enumerate(line.split(" ")):
            sep = ("\n" if i == 0 else " ") if current else ""
            while len(word) > limit:
                if current:
                    chunks.append(current)
                    current = ""
                chunks.append(word[:limit])
                word = word[limit:]
                sep = ""
            if len(current) + len(sep) + len(word) <= limit:
                current = f"{current}{sep}{word}"
            else:
                chunks.append(current)
                current = word
    if current:
        chunks.append(current)
    return chunks
