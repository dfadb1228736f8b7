"""Rotation engine producing the per-byte substitution offset."""

# Bit window width and cursor step over the 32-bit seq constant
WINDOW_MASK = 0x1F
CURSOR_STEP = 3
CURSOR_LIMIT = 28

_UINT32 = 0xFFFFFFFF


class RotationEngine:
    """
    Cycle a 5-bit window across the seq constant.

    The cursor visits 0, 3, ..., 27 and then wraps, so the offset
    sequence repeats every 10 calls regardless of the data being
    transformed. One engine serves a single encode or decode call.
    """

    def __init__(self):
        self.cursor = 0

    def next_offset(self, seq_constant: int, owner_id: int) -> int:
        """
        Return the offset for the next byte and advance the cursor.

        Args:
            seq_constant: 32-bit constant selected by the key index
            owner_id: Masked numeric uid of the secret file owner

        Returns:
            Substitution offset (window bits + owner id)
        """
        addin = (((seq_constant & _UINT32) >> self.cursor) & WINDOW_MASK) + owner_id
        self.cursor += CURSOR_STEP
        if self.cursor > CURSOR_LIMIT:
            self.cursor = 0
        return addin
