"""Compose the message text sent to the agent service."""

from __future__ import annotations

from collections.abc import Sequence

from clawrelay.state.relay import AttachmentRef
from clawrelay.config.relay import ATTACHMENT_MANIFEST_FOOTER, ATTACHMENT_MANIFEST_HEADER


def manifest_line(attachment: AttachmentRef) -> str:
    return f"- {attachment.file_name} [{attachment.type_label}] path: {attachment.path}"


def build_relay_text(text: str, attachments: Sequence[AttachmentRef]) -> str:
    """Return `text` unchanged, or followed by a manifest of the attached files."""
    if not attachments:
        return text
    lines = [text, "", ATTACHMENT_MANIFEST_HEADER]
    lines.extend(manifest_line(a) for a in attachments)
    lines.append("")
    lines.append(ATTACHMENT_MANIFEST_FOOTER)
    return "\n".join(lines)


__all__ = ["build_relay_text", "manifest_line"]
