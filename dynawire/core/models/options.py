from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CodecOptions:
    """
    Behaviour switches for the encoder and decoder.

    Instances are immutable and handed to Encoder/Decoder explicitly, so
    concurrent callers never share writable state.
    """
    decode_sets_as_sets: bool = True
    """
    Decode SS/NS/BS into Python sets. When False, set tags decode into lists
    in wire order (legacy behaviour).
    """

    strip_empty_strings: bool = False
    """
    Drop map attributes whose value is the empty string before encoding
    (legacy behaviour for services that rejected empty attributes).
    """
