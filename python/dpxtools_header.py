#!/usr/bin/env python3

"""dpxtools_header.py module description.

DPX header parser.

A DPX file starts with a fixed-layout header. We read the generic file
header (magic number, pixel data offset, version, file size) and the
image information header, of which only the first image element is
consulted.
"""


import collections
import struct
import sys

import dpxtools_common
import dpxtools_layout


# image information header
IIHEADER_OFFSET = 768
# image element info in image information header
IMAGE_ELEMENT_SIZE = 72


def element_offset(element):
    return IIHEADER_OFFSET + 12 + element * IMAGE_ELEMENT_SIZE


# (field name, offset, struct format)
# Formats are endianness-less: the file endianness is prepended on read.
HEADER_FIELDS = (
    # generic file header
    ("offset", 4, "I"),
    ("version", 8, "8s"),
    ("file_size", 16, "I"),
    # image information header
    ("orientation", IIHEADER_OFFSET + 0, "H"),
    ("element_count", IIHEADER_OFFSET + 2, "H"),
    ("width", IIHEADER_OFFSET + 4, "I"),
    ("height", IIHEADER_OFFSET + 8, "I"),
    # image element #0
    ("data_sign", element_offset(0) + 0, "I"),
    ("description", element_offset(0) + 20, "B"),
    ("transfer", element_offset(0) + 21, "B"),
    ("colorimetry", element_offset(0) + 22, "B"),
    ("bit_size", element_offset(0) + 23, "B"),
    ("packing", element_offset(0) + 24, "H"),
)


class DPXHeader(
    collections.namedtuple(
        "DPXHeader",
        [
            "little_endian",
            "offset",
            "width",
            "height",
            "description",
            "bit_size",
            "packing",
            "num_components",
            "component_type",
            "version",
            "file_size",
            "orientation",
            "element_count",
            "data_sign",
            "transfer",
            "colorimetry",
        ],
    )
):
    __slots__ = ()

    @property
    def endianness(self):
        return (
            dpxtools_common.Endianness.little
            if self.little_endian
            else dpxtools_common.Endianness.big
        )

    def __str__(self):
        return "\n".join(f"{k}: {v}" for (k, v) in self.as_dict().items())

    def as_dict(self):
        header_dict = self._asdict()
        header_dict["endianness"] = self.endianness.name
        header_dict["component_type"] = str(self.component_type)
        return header_dict


def read_field(buffer, offset, fmt, endianness):
    size = struct.calcsize(fmt)
    if offset + size > len(buffer):
        raise dpxtools_common.TruncatedHeaderException(offset, size, len(buffer))
    prefix = "<" if endianness == dpxtools_common.Endianness.little else ">"
    return struct.unpack_from(prefix + fmt, buffer, offset)[0]


def get_endianness(buffer):
    # the magic number is always read big-endian
    if len(buffer) < 4:
        raise dpxtools_common.NotDPXException()
    magic = struct.unpack_from(">I", buffer, 0)[0]
    endianness = dpxtools_common.Endianness.from_magic(magic)
    if endianness is None:
        raise dpxtools_common.NotDPXException(magic)
    return endianness


def parse_header(buffer, logfd=sys.stdout, debug=0):
    """Parse the header of a DPX file.

    Args:
        buffer: bytes-like object containing (at least) the DPX header
        logfd: file descriptor for log messages
        debug: verbosity level

    Returns:
        DPXHeader - the (immutable) header record

    Raises:
        NotDPXException: the magic number is not a DPX one
        TruncatedHeaderException: the buffer is too short for the header
        UnknownDescriptionCodeException: unknown element 0 descriptor
    """
    endianness = get_endianness(buffer)
    fields = {}
    for name, offset, fmt in HEADER_FIELDS:
        fields[name] = read_field(buffer, offset, fmt, endianness)
    # "V2.0\0\0\0\0" -> "V2.0"
    fields["version"] = fields["version"].split(b"\x00", 1)[0].decode(
        "ascii", "replace"
    )
    description = fields["description"]
    header = DPXHeader(
        little_endian=(endianness == dpxtools_common.Endianness.little),
        num_components=dpxtools_layout.get_num_components(description),
        component_type=dpxtools_layout.get_component_type(description),
        **fields,
    )
    if debug > 0:
        print(
            f"debug: dpx header: {header.width}x{header.height} "
            f"{header.bit_size}bit {header.component_type} "
            f"endianness: {header.endianness.name} offset: {header.offset}",
            file=logfd,
        )
    if debug >= 0 and header.element_count > 1:
        print(
            f"warn: {header.element_count} image elements: only element 0 is read",
            file=logfd,
        )
    return header
