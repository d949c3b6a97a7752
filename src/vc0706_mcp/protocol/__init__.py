"""Protocol layer: frame codec, opcode table, command builders, and reply parsing."""

from .framing import (
    Reply,
    Status,
    decode_and_check_reply,
    encode_command,
    encode_reply,
    encode_simple_command,
    encode_simple_reply,
    verify_chunk_frame,
)
from .commands import ImageSize, Opcode, build_command
