from .prelude import ConfigError


def parse_hex_color(value):
    """
    Parse a background color.

    Args:
        value (str): #RRGGBB or #RRGGBBAA, case-insensitive, leading # optional.

    Returns:
        Tuple[int, int, int, int]: RGBA, alpha 255 when not given.
    """
    digits = value.strip()
    if digits.startswith('#'):
        digits = digits[1:]

    if len(digits) not in (6, 8):
        raise ConfigError('Background color must be #RRGGBB or #RRGGBBAA, got `{}`'.format(value))

    channels = []
    for i in range(0, len(digits), 2):
        group = digits[i:i + 2]
        # int(.., 16) also takes signs and underscores
        if any(c not in '0123456789abcdefABCDEF' for c in group):
            raise ConfigError('Invalid hex group `{}` in background color `{}`'.format(group, value))
        channels.append(int(group, 16))

    if len(channels) == 3:
        channels.append(255)
    return tuple(channels)
