"""Answer matching rules."""


def normalize_answer(text) -> str:
    """Trim and case-fold an answer for comparison."""
    if text is None:
        return ''
    return str(text).strip().casefold()


def is_answer_correct(selected_answer, correct_answer) -> bool:
    """
    Case-insensitive, trimmed exact match against the authoritative answer.

    Examples:
        >>> is_answer_correct('  Emergency Fund ', 'emergency fund')
        True
        >>> is_answer_correct('', '')
        False
    """
    selected = normalize_answer(selected_answer)
    if not selected:
        return False
    return selected == normalize_answer(correct_answer)
