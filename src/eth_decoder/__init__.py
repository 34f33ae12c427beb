"""
Ethereum Raw Decoder

Decodes raw Ethereum transactions (legacy, EIP-2930 and EIP-1559 envelopes)
and ABI-encoded calldata into structured, inspectable values without
re-executing the chain.
"""

__version__ = "0.1.0"
