from attr import attrs, attrib, fields
import yaml
from .prelude import ConfigError, check_positive, check_non_negative, image_format
from .color import parse_hex_color
from .montage import GridSpec


def _required(self, attribute, value):
    if value is None or str(value).strip() == '':
        raise ConfigError('An input video path is required')


def _to_str(value):
    return value if value is None else str(value)


def _to_int(value):
    # bool is an int subclass, floats would be truncated
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        digits = value.strip()
        if digits[:1] in ('+', '-'):
            digits = digits[1:]
        if digits.isdigit():
            return int(value)
    raise ConfigError('Expected an integer, got `{}`'.format(value))


@attrs(frozen=True)
class SheetConfig:
    input = attrib(type=str, converter=_to_str, validator=_required)
    output = attrib(type=str, default='preview.png')
    rows = attrib(type=int, default=3, converter=_to_int, validator=check_positive)
    cols = attrib(type=int, default=3, converter=_to_int, validator=check_positive)
    cell_width = attrib(type=int, default=320, converter=_to_int, validator=check_positive)
    cell_height = attrib(type=int, default=0, converter=_to_int, validator=check_non_negative)
    margin = attrib(type=int, default=8, converter=_to_int, validator=check_non_negative)
    quality = attrib(type=int, default=90, converter=_to_int)
    background = attrib(type=str, default='#FFFFFF', converter=str)
    workers = attrib(type=int, default=1, converter=_to_int, validator=check_positive)

    @output.validator
    def _check_output(self, attribute, value):
        image_format(value)

    @quality.validator
    def _check_quality(self, attribute, value):
        if not 1 <= value <= 100:
            raise ConfigError('quality must be in 1-100, got {}'.format(value))

    @background.validator
    def _check_background(self, attribute, value):
        parse_hex_color(value)

    def grid_spec(self):
        return GridSpec(
            rows=self.rows,
            cols=self.cols,
            cell_width=self.cell_width,
            cell_height=self.cell_height,
            margin=self.margin,
            background=parse_hex_color(self.background))

    @classmethod
    def from_yaml(cls, path, **overrides):
        """
        Load a config from a YAML mapping of option names to values.

        Keyword arguments override values from the file; `None` means "not given".
        """
        try:
            with open(path) as f:
                values = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError('Could not read config file {}: {}'.format(path, e)) from e
        except yaml.YAMLError as e:
            raise ConfigError('Could not parse config file {}: {}'.format(path, e)) from e

        if not isinstance(values, dict):
            raise ConfigError('Config file {} must contain a mapping'.format(path))

        return cls.from_dict(values, **overrides)

    @classmethod
    def from_dict(cls, values, **overrides):
        values = {str(k).replace('-', '_'): v for k, v in values.items()}
        values.update({k: v for k, v in overrides.items() if v is not None})

        known = set(a.name for a in fields(cls))
        unknown = sorted(set(values) - known)
        if len(unknown) > 0:
            raise ConfigError('Unknown config options: {}'.format(', '.join(unknown)))

        if 'input' not in values:
            raise ConfigError('An input video path is required')

        return cls(**values)
