def sample_timestamps(duration, count):
    """
    Pick `count` evenly spaced sample times in seconds.

    The samples split (0, duration) into count + 1 equal intervals, so the very first and
    last instants of the video are never used. A single sample lands on the midpoint.

    Args:
        duration (float): Length of the video in seconds.
        count (int): Number of samples.

    Returns:
        List[float]: Strictly increasing times, all strictly inside (0, duration).
    """
    if count <= 0:
        return []
    if count == 1:
        return [duration / 2]

    interval = duration / (count + 1)
    return [interval * (i + 1) for i in range(count)]
