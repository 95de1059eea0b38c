"""Handlers package - Telegram bot commands and callbacks."""


def format_error_message(emoji: str, problem: str, action: str) -> str:
    """
    Format error messages following the pattern: [emoji] [problem] [action].

    Example:
        >>> format_error_message("❌", "Mall not found.", "Use /malls to see nearby malls.")
        "❌ Mall not found.\n\nUse /malls to see nearby malls."
    """
    return f"{emoji} {problem}\n\n{action}"


ERROR_TEMPLATES = {
    "permission_denied": lambda: format_error_message(
        "🔒",
        "You don't have permission to perform this action.",
        "Only admins can manage malls, stores and promotions."
    ),
    "location_required": lambda: format_error_message(
        "📍",
        "I don't know where you are yet.",
        "Share your location with the 📍 button (or the attachment menu) and try again."
    ),
    "mall_not_found": lambda: format_error_message(
        "❌",
        "Mall not found.",
        "It may have been removed. Use /malls to see nearby malls."
    ),
    "store_not_found": lambda: format_error_message(
        "❌",
        "Store not found.",
        "It may have been removed. Use /malls to browse again."
    ),
    "promotion_not_found": lambda: format_error_message(
        "❌",
        "Promotion not found.",
        "Use /promotions to see current promotions."
    ),
    "no_results": lambda what: format_error_message(
        "😔",
        f"No {what} found.",
        "Try a different search or check back later."
    ),
    "invalid_input": lambda field, requirement: format_error_message(
        "❌",
        f"Invalid {field}.",
        f"{requirement}. Please try again."
    ),
}
