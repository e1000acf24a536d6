"""Privacy preview of what an index would expose to downstream consumers."""

from typing import Callable, Optional

from ..models import IndexedProject, PreviewEntry, PrivacyPreview


def build_privacy_preview(project: IndexedProject,
                          sanitize: Optional[Callable[[str], str]] = None) -> PrivacyPreview:
    """List every indexed file with its preview, optionally passed through ``sanitize``.

    A file is ``included`` when its content was loaded, i.e. when it could be
    quoted in a walkthrough.
    """
    entries = []
    for f in project.files:
        preview = f.preview or ""
        if preview and sanitize is not None:
            preview = sanitize(preview)
        entries.append(PreviewEntry(
            path=f.path,
            size=f.size,
            preview=preview,
            included=f.content is not None,
        ))
    return PrivacyPreview(
        files=tuple(entries),
        total_size=project.total_size,
        file_count=len(entries),
    )
