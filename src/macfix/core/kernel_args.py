"""Transforms for kernel command-line strings.

Each function here returns the same result when fed its own output, so it
can be used as a ``ConfigLine.transform``.
"""

from collections.abc import Callable, Iterable


def strip_tokens(value: str, tokens: Iterable[str]) -> str:
    """Remove every whitespace-separated token that appears in ``tokens``.

    Args:
        value: Kernel command line
        tokens: Exact tokens to drop (e.g. ``quiet``, ``splash``)

    Returns:
        Command line with the tokens removed and whitespace normalised
    """
    drop = set(tokens)
    return " ".join(token for token in value.split() if token not in drop)


def append_token(value: str, token: str) -> str:
    """Append ``token`` unless it is already present.

    Args:
        value: Kernel command line
        token: Token to append (e.g. ``usbcore.autosuspend=-1``)

    Returns:
        Command line ending with the token, whitespace normalised
    """
    parts = value.split()
    if token not in parts:
        parts.append(token)
    return " ".join(parts)


def kernel_args_transform(
    strip: Iterable[str] = (), append: Iterable[str] = ()
) -> Callable[[str], str]:
    """Build a transform that strips some tokens and appends others.

    Args:
        strip: Tokens to remove
        append: Tokens to add, in order, when missing

    Returns:
        Function mapping an old command line to the new one
    """
    strip = tuple(strip)
    append = tuple(append)

    def transform(value: str) -> str:
        result = strip_tokens(value, strip)
        for token in append:
            result = append_token(result, token)
        return result

    return transform
