import pyperclip  # type: ignore[import-untyped]

from direnum.utils.logger import logger


def copy_to_clipboard(text: str) -> bool:
    """
    Copies rendered options or match results to the system clipboard.

    :param text: The string to copy.
    :return: True if successful, False otherwise.
    """
    if not text:
        logger.debug("Clipboard: No text provided to copy.")
        return False
    try:
        pyperclip.copy(text)
        return True
    except pyperclip.PyperclipException as e:
        logger.warning(
            f"Clipboard: Pyperclip could not access the clipboard system: {e}. "
            "This might be due to a missing copy/paste mechanism (e.g., xclip or xsel on Linux)."
        )
        return False
