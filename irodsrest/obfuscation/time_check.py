"""Timestamp comparison with drift tolerance and 16-bit rollover."""

TIME_FUDGE = 20
ROLLOVER_THRESHOLD = 65000
ROLLOVER_ADJUST = 65535


def obfi_time_check(time1: int, time2: int) -> bool:
    """
    Compare the encoded header time against the file time.

    Both values are the low 16 bits of a timestamp. When one of them has
    rolled over past 0xFFFF, values below 65000 are lifted by 65535
    before the second comparison.

    Args:
        time1: Time decoded from the header
        time2: File modification time & 0xFFFF

    Returns:
        True if the times match within the fudge window
    """
    if abs(time1 - time2) < TIME_FUDGE:
        return True

    if time1 < ROLLOVER_THRESHOLD:
        time1 += ROLLOVER_ADJUST
    if time2 < ROLLOVER_THRESHOLD:
        time2 += ROLLOVER_ADJUST

    return abs(time1 - time2) < TIME_FUDGE
