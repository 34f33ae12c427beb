"""
Human-readable function signature helpers.

Signatures come from the signature registry or from an ABI, in the text form
"name(type1,type2,...)". Parameter type tags are taken verbatim; whether a tag
is a decodable ABI type is decided later by the parameter walker.
"""

from web3 import Web3


def _parameter_span(signature: str) -> tuple[int, int] | None:
    """Return indices of the first '(' and its matching ')', if any."""
    start = signature.find("(")
    if start == -1:
        return None

    depth = 0
    for index in range(start, len(signature)):
        char = signature[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return start, index
    return None


def _split_top_level(text: str) -> list[str]:
    parts = []
    depth = 0
    current = []
    for char in text:
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        current.append(char)
    parts.append("".join(current))
    return parts


def parse_parameter_types(signature: str) -> list[str]:
    """
    Extract the ordered parameter type tags from a function signature.

    Args:
        signature: Text signature such as "transfer(address,uint256)"

    Returns:
        List of type tags, e.g. ["address", "uint256"]. Returns an empty list
        for a zero-argument function or when no parentheses are present.

    Notes:
        - Commas inside tuple types are not split on:
          "f((address,uint256)[],bool)" -> ["(address,uint256)[]", "bool"]
        - Parameter names are dropped: "f(address to)" -> ["address"]
    """
    span = _parameter_span(signature)
    if span is None:
        return []

    interior = signature[span[0] + 1 : span[1]].strip()
    if not interior:
        return []

    types = []
    for part in _split_top_level(interior):
        part = part.strip()
        if part.startswith("("):
            # Keep the tuple and any array suffix glued to it, drop the name
            close = part.rfind(")")
            suffix = part[close + 1 :]
            if suffix and not suffix[0].isspace():
                suffix = suffix.split()[0]
            else:
                suffix = ""
            types.append(part[: close + 1] + suffix)
        else:
            tokens = part.split()
            types.append(tokens[0] if tokens else "")
    return types


def parse_function_name(signature: str) -> str:
    """Return the function name part of a signature ("" if there is none)."""
    start = signature.find("(")
    name = signature if start == -1 else signature[:start]
    return name.strip()


def canonical_signature(name: str, parameter_types: list[str]) -> str:
    """Build the canonical "name(type1,type2)" form used for selectors."""
    return f"{name}({','.join(parameter_types)})"


def function_selector(signature: str) -> bytes:
    """
    Compute the 4-byte selector of a canonical signature.

    Example:
        >>> function_selector("transfer(address,uint256)").hex()
        'a9059cbb'
    """
    return bytes(Web3.keccak(text=signature)[:4])
