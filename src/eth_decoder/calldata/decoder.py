"""
Decode contract calldata into a FunctionCall.

Pipeline: extract the selector, resolve it to a text signature through an
injected resolver, parse the parameter type list from the signature, and walk
the parameter block.

Usage:
    from eth_decoder.calldata.decoder import decode_calldata
    from eth_decoder.calldata.registry import FourByteRegistry

    call = decode_calldata("0xa9059cbb...", resolver=FourByteRegistry())
    print(call.name, call.parameter_values)
"""

import logging

from hexbytes import HexBytes

from ..exceptions import NoSignatureFoundError
from .registry import SignatureResolver, resolve_signatures
from .selector import extract_selector
from .signature import (
    canonical_signature,
    function_selector,
    parse_function_name,
    parse_parameter_types,
)
from .values import FunctionCall
from .walker import ParameterWalker

logger = logging.getLogger(__name__)


def decode_with_signature(
    calldata: str | bytes | HexBytes,
    signature: str,
    candidates: tuple[str, ...] = (),
) -> FunctionCall:
    """
    Decode calldata against a known text signature.

    Args:
        calldata: Hex text (0x optional) or raw bytes, selector included
        signature: Text signature, e.g. "transfer(address,uint256)"
        candidates: Ranked candidate signatures to record on the result

    Returns:
        FunctionCall with decoded parameter values

    Raises:
        EmptyInputError, InvalidHexEncodingError, CalldataTooShortError:
            If the calldata cannot supply a selector
        TruncatedCalldataError: If the parameters run past the buffer

    Notes:
        - A signature whose selector differs from the calldata's is still
          used, with a warning
    """
    selector, parameter_block = extract_selector(calldata)
    return _decode_parameters(selector, parameter_block, signature, candidates or (signature,))


def decode_calldata(
    calldata: str | bytes | HexBytes, resolver: SignatureResolver
) -> FunctionCall:
    """
    Decode calldata, resolving its signature through a resolver.

    Args:
        calldata: Hex text (0x optional) or raw bytes, selector included
        resolver: Callable mapping a selector to ranked candidate signatures

    Returns:
        FunctionCall decoded with the primary candidate. When the resolver
        knows no signature, a FunctionCall carrying only the selector.

    Raises:
        EmptyInputError, InvalidHexEncodingError, CalldataTooShortError:
            If the calldata cannot supply a selector
        SignatureLookupError: If the resolver fails (transport error, timeout)
        TruncatedCalldataError: If the parameters run past the buffer
    """
    selector, parameter_block = extract_selector(calldata)

    try:
        candidates = resolve_signatures(selector, resolver)
    except NoSignatureFoundError as e:
        logger.warning(f"{e}; reporting selector only")
        return FunctionCall(selector=selector)

    if len(candidates) > 1:
        logger.info(
            f"{len(candidates)} candidate signatures for 0x{selector.hex()}, "
            f"using {candidates[0]}"
        )

    return _decode_parameters(selector, parameter_block, candidates[0], tuple(candidates))


def _decode_parameters(
    selector: bytes,
    parameter_block: bytes,
    signature: str,
    candidates: tuple[str, ...],
) -> FunctionCall:
    parameter_types = parse_parameter_types(signature)
    name = parse_function_name(signature)

    expected = function_selector(canonical_signature(name, parameter_types))
    if expected != selector:
        logger.warning(
            f"Signature {signature} has selector 0x{expected.hex()}, "
            f"calldata has 0x{selector.hex()}"
        )

    values = ParameterWalker(parameter_types).walk(parameter_block)
    logger.debug(f"Decoded {name} with {len(values)} parameters")

    return FunctionCall(
        selector=selector,
        signature=signature,
        name=name,
        parameter_types=tuple(parameter_types),
        parameter_values=tuple(values),
        candidates=candidates,
    )
