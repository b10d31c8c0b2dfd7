#!/usr/bin/env python3

"""dpxtools_common.py module description.


Module that contains common code: exceptions and configuration.
"""


import enum


# DPX files start with "SDPX" (big-endian) or "XPDS" (little-endian)
MAGIC_BE = 0x53445058
MAGIC_LE = 0x58504453


class Endianness(enum.Enum):
    big = 0
    little = 1

    @classmethod
    def from_magic(cls, magic):
        if magic == MAGIC_BE:
            return cls.big
        elif magic == MAGIC_LE:
            return cls.little
        return None

    def get_byteorder(self):
        # int.from_bytes()/int.to_bytes() byteorder
        return "little" if self == self.little else "big"


class DPXException(Exception):
    """DPX issue."""


class ParseException(DPXException):
    """Header issue."""


class NotDPXException(ParseException):
    def __init__(self, magic=None):
        self.magic = magic
        super().__init__("Invalid format: not a DPX file")


class UnknownDescriptionCodeException(ParseException):
    def __init__(self, description):
        self.description = description
        super().__init__(f"Unknown image element description: {description}")


class TruncatedHeaderException(ParseException):
    def __init__(self, offset, size, length):
        self.offset = offset
        self.size = size
        self.length = length
        super().__init__(
            f"Truncated header: cannot read {size} bytes at offset {offset} "
            f"(buffer length: {length})"
        )


class DecodeException(DPXException):
    """Pixel data issue."""


class UnsupportedFormatException(DecodeException):
    def __init__(self, bit_size, component_type, packing):
        self.bit_size = bit_size
        self.component_type = component_type
        self.packing = packing
        component_type_str = getattr(component_type, "value", component_type)
        super().__init__(
            f"Unsupported pixel type: {bit_size}bit {component_type_str}-{packing}"
        )


class PixelReadException(DecodeException):
    def __init__(self, x, y, c, bit_size=None, description=None):
        self.x = x
        self.y = y
        self.c = c
        self.bit_size = bit_size
        self.description = description
        super().__init__(
            f"Failed to read image data ({x},{y}.{c},{bit_size},{description})"
        )


class TruncatedDataException(DecodeException):
    def __init__(self, expected, available):
        self.expected = expected
        self.available = available
        super().__init__(
            f"Truncated image data: need {expected} bytes, got {available}"
        )


class BufferReadException(DPXException):
    def __init__(self, infile):
        self.infile = infile
        super().__init__(f"Failed to read file {infile}")


class Config:
    DEFAULT_VALUES = {
        "check_data_size": False,
        "drop_buffer": False,
    }

    def __init__(self):
        self.config_dict = {}

    def __str__(self):
        return "\n".join(f"{k}: {v}" for (k, v) in self.config_dict.items())

    @classmethod
    def Create(cls, options):
        config_dict = cls()
        for key, val in vars(options).items():
            if key in cls.DEFAULT_VALUES.keys():
                config_dict.set(key, val)
        return config_dict

    @classmethod
    def set_parser_options(cls, parser):
        parser.add_argument(
            "--check-data-size",
            dest="check_data_size",
            action="store_true",
            default=cls.DEFAULT_VALUES["check_data_size"],
            help="Check the pixel data size before decoding%s"
            % (" [default]" if cls.DEFAULT_VALUES["check_data_size"] else ""),
        )
        parser.add_argument(
            "--no-check-data-size",
            dest="check_data_size",
            action="store_false",
            help="Fail on the first out-of-bounds pixel read%s"
            % (" [default]" if not cls.DEFAULT_VALUES["check_data_size"] else ""),
        )
        parser.add_argument(
            "--drop-buffer",
            dest="drop_buffer",
            action="store_true",
            default=cls.DEFAULT_VALUES["drop_buffer"],
            help="Release the raw file buffer after decoding%s"
            % (" [default]" if cls.DEFAULT_VALUES["drop_buffer"] else ""),
        )
        parser.add_argument(
            "--no-drop-buffer",
            dest="drop_buffer",
            action="store_false",
            help="Keep the raw file buffer after decoding%s"
            % (" [default]" if not cls.DEFAULT_VALUES["drop_buffer"] else ""),
        )

    def get(self, key):
        return self.config_dict.get(key, self.DEFAULT_VALUES[key])

    def set(self, key, val):
        self.config_dict[key] = val
