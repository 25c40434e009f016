"""Element fingerprints for exact membership tests across captures."""

from flowtrace.recorder.models import ElementDescriptor


DEFAULT_FINGERPRINT_TEXT_CHARS = 50


def element_fingerprint(
    element: ElementDescriptor,
    text_chars: int = DEFAULT_FINGERPRINT_TEXT_CHARS,
) -> str:
    """Compute a stable identity key for an interactive element.

    Strategies in priority order:
    1. ``id:<id>`` when the element has an id
    2. ``name:<tag>:<name>`` when it has a name attribute
    3. ``combo:`` followed by tag, type, role, placeholder, text prefix and
       first class token, skipping empty parts

    Args:
        element: Element descriptor.
        text_chars: Number of text characters included in the combo key.

    Returns:
        Fingerprint string.
    """
    if element.id:
        return f"id:{element.id}"

    if element.name:
        return f"name:{element.tag_name or ''}:{element.name}"

    class_tokens = (element.class_name or "").split()
    parts = [
        element.tag_name or "",
        element.type or "",
        element.role or "",
        element.placeholder or "",
        (element.text_content or "").strip()[:text_chars],
        class_tokens[0] if class_tokens else "",
    ]
    return "combo:" + "|".join(part for part in parts if part)
